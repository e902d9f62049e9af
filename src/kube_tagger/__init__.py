"""Propagate PersistentVolumeClaim annotations onto EBS volume tags."""

__version__ = "0.1.0"
