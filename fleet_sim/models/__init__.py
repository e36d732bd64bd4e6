"""Data models for the fleet simulation."""
