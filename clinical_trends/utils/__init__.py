"""Shared parsing utilities."""
