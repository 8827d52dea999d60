"""Texel formats and file writers."""
