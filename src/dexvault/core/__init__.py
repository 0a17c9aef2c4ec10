"""Core algorithms with no I/O."""
