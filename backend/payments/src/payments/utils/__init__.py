"""Utility helpers for the payments service."""
