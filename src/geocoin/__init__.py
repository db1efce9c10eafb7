"""Geocoin: deterministic cache discovery and coin ledger for a location-based game."""
