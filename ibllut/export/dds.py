"""Minimal DirectDraw Surface writer.

Writes uncompressed single-mip 2D textures using the DX10 header extension,
which is the only way to describe float formats such as R16G16_FLOAT.
"""

from __future__ import annotations

import struct
from pathlib import Path

import numpy as np

from ibllut.export.formats import TexelFormat, dxgi_format, quantize

DDS_MAGIC = b"DDS "

DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PITCH = 0x8
DDSD_PIXELFORMAT = 0x1000
DDSD_MIPMAPCOUNT = 0x20000

DDPF_FOURCC = 0x4
DDSCAPS_TEXTURE = 0x1000

D3D10_RESOURCE_DIMENSION_TEXTURE2D = 3

HEADER_SIZE = 124
PIXELFORMAT_SIZE = 32


def _header(width: int, height: int, pitch: int) -> bytes:
    flags = (DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PITCH
             | DDSD_PIXELFORMAT | DDSD_MIPMAPCOUNT)
    header = struct.pack(
        "<7I", HEADER_SIZE, flags, height, width, pitch, 0, 1,
    )
    header += struct.pack("<11I", *([0] * 11))
    header += struct.pack(
        "<2I4s5I", PIXELFORMAT_SIZE, DDPF_FOURCC, b"DX10", 0, 0, 0, 0, 0,
    )
    header += struct.pack("<5I", DDSCAPS_TEXTURE, 0, 0, 0, 0)
    return header


def _dx10_header(dxgi: int) -> bytes:
    return struct.pack("<5I", dxgi, D3D10_RESOURCE_DIMENSION_TEXTURE2D, 0, 1, 0)


def encode_dds(buffer: np.ndarray, fmt: TexelFormat) -> bytes:
    """Encode an (H, W, C) table as DDS bytes in the given texel format."""
    if buffer.ndim != 3:
        raise ValueError(f"Expected an (H, W, C) table, got shape {buffer.shape}")
    height, width, channels = buffer.shape
    dxgi = dxgi_format(fmt, channels)
    pixels = quantize(buffer, fmt)
    pixels = pixels.astype(pixels.dtype.newbyteorder("<"), copy=False)
    pitch = width * channels * fmt.bytes_per_channel

    return DDS_MAGIC + _header(width, height, pitch) + _dx10_header(dxgi) + pixels.tobytes()


def write_dds(path: Path, buffer: np.ndarray, fmt: TexelFormat) -> Path:
    path = Path(path)
    data = encode_dds(buffer, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
