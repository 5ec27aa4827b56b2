"""Outfit Advisor: AI style critique for outfit photos."""

__version__ = "1.0.0"
