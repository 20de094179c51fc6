"""Persistence of merged calendar years."""
