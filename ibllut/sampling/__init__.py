"""Quasi-random sequences and microfacet importance sampling."""
