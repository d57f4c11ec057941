"""Shared helpers for the launcher."""
