"""Quart web API for People of History."""
