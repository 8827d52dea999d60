"""Split-sum environment BRDF integration."""
