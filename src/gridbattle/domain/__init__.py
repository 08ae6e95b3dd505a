"""Domain models and pure combat rules."""
