"""Core application layer for Vector Manager (configuration)."""
