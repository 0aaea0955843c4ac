"""Authoritative simulation server for a multiplayer survival shooter."""
