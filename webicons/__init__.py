"""Resolve and cache the best icon for a web page or installed web app."""
