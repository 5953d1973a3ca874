"""Shared helpers for fieldmap."""
