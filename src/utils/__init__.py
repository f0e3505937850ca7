"""Utilities package for the menu bulk import service."""
