"""Vector Manager test package."""
