"""Shared helpers for natded."""
