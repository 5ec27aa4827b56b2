"""HTTP API for Outfit Advisor."""
