"""Deterministic simulation core for a single-player nation-management game."""
