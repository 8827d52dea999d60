"""Offline precomputation of image-based-lighting lookup tables."""

__version__ = "0.1.0"

from ibllut.brdf.integrate import integrate_brdf
from ibllut.mapping.cube import equirect_uv_to_cube_uv, eye_to_cube_uv
from ibllut.mapping.equirect import equirect_uv_to_eye, eye_to_equirect_uv
from ibllut.raster.tables import TableDescriptor, TableKind, rasterize
from ibllut.sampling.ggx import importance_sample_ggx
from ibllut.sampling.hammersley import hammersley
from ibllut.validation import LookupTableError, RangeValidationError, TableSizeError

__all__ = [
    "hammersley",
    "importance_sample_ggx",
    "integrate_brdf",
    "eye_to_equirect_uv",
    "equirect_uv_to_eye",
    "eye_to_cube_uv",
    "equirect_uv_to_cube_uv",
    "TableKind",
    "TableDescriptor",
    "rasterize",
    "LookupTableError",
    "RangeValidationError",
    "TableSizeError",
]
