"""Utility modules: I/O, logging and timing."""
