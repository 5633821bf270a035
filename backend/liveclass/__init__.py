"""Live class gateway backend."""
