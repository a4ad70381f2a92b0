"""Completion sounds."""
