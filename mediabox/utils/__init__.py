"""Utility helpers shared across mediabox layers."""
