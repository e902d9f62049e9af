"""AWS EC2 implementation of the volume tag provider."""
