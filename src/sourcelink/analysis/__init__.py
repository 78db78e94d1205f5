"""Analysis passes over Source programs."""
