"""Shared helpers: geo math, regions, API envelope and error handling."""
