"""Direction parameterizations: eye vector, equirectangular UV, cube unwrap UV."""
