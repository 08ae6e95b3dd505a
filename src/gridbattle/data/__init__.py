"""Definition loading and validation."""
