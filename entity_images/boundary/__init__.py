"""Boundary adapters: database and imaging."""
