"""Minimal SDK laid out like the real one, for end-to-end tests."""
