"""Helpers shared by the icon pipeline."""
