"""Domain services shared across API modules."""
