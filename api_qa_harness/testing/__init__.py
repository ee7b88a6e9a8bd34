"""Helpers for tests and for seeding the API with generated data."""
