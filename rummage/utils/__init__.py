"""Utility helpers for rummage."""
