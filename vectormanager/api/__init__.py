"""Vector Manager API package."""
