"""Lookup table rasterization."""
