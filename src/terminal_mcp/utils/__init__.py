"""Standalone helpers: key encoding and prompt detection."""
