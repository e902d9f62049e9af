"""Volume tag provider interface."""
