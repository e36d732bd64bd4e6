"""Builders for the initial fleet state."""
