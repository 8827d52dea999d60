"""Texel storage formats.

Tables are computed in float64; these helpers quantize them to whatever the
consuming renderer samples.
"""

from __future__ import annotations

import enum

import numpy as np

from ibllut.validation import LookupTableError


class UnsupportedFormatError(LookupTableError):
    pass


class TexelFormat(enum.Enum):
    FLOAT16 = "float16"
    FLOAT32 = "float32"
    UNORM8 = "unorm8"

    @classmethod
    def parse(cls, name: str) -> "TexelFormat":
        key = name.strip().lower()
        for fmt in cls:
            if fmt.value == key:
                return fmt
        choices = ", ".join(f.value for f in cls)
        raise UnsupportedFormatError(f"Unknown texel format '{name}' (expected one of: {choices})")

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self])

    @property
    def bytes_per_channel(self) -> int:
        return self.dtype.itemsize


_DTYPES = {
    TexelFormat.FLOAT16: np.float16,
    TexelFormat.FLOAT32: np.float32,
    TexelFormat.UNORM8: np.uint8,
}

# (format, channels) -> DXGI_FORMAT
_DXGI_FORMATS = {
    (TexelFormat.FLOAT32, 4): 2,    # R32G32B32A32_FLOAT
    (TexelFormat.FLOAT32, 3): 6,    # R32G32B32_FLOAT
    (TexelFormat.FLOAT16, 4): 10,   # R16G16B16A16_FLOAT
    (TexelFormat.FLOAT32, 2): 16,   # R32G32_FLOAT
    (TexelFormat.UNORM8, 4): 28,    # R8G8B8A8_UNORM
    (TexelFormat.FLOAT16, 2): 34,   # R16G16_FLOAT
    (TexelFormat.FLOAT32, 1): 41,   # R32_FLOAT
    (TexelFormat.UNORM8, 2): 49,    # R8G8_UNORM
    (TexelFormat.FLOAT16, 1): 54,   # R16_FLOAT
    (TexelFormat.UNORM8, 1): 61,    # R8_UNORM
}


def dxgi_format(fmt: TexelFormat, channels: int) -> int:
    try:
        return _DXGI_FORMATS[(fmt, channels)]
    except KeyError:
        raise UnsupportedFormatError(
            f"No DXGI format for {channels}-channel {fmt.value} texels"
        ) from None


def quantize(buffer: np.ndarray, fmt: TexelFormat) -> np.ndarray:
    """Convert a float table to ``fmt``'s dtype. Returns a C-contiguous array.

    unorm8 clamps to [0, 1] and rounds to the nearest of 256 levels.
    """
    buffer = np.asarray(buffer, dtype=np.float64)
    if fmt is TexelFormat.UNORM8:
        scaled = np.rint(np.clip(buffer, 0.0, 1.0) * 255.0)
        return np.ascontiguousarray(scaled.astype(np.uint8))
    return np.ascontiguousarray(buffer.astype(fmt.dtype))
