"""Tuning dictionaries for the shoal simulation."""
