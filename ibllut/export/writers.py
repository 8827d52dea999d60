"""Raw binary, PNG and manifest writers for generated tables."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
from PIL import Image

from ibllut.export.formats import TexelFormat, UnsupportedFormatError, quantize


@dataclass
class ManifestEntry:
    file: str
    kind: str
    format: str
    width: int
    height: int
    channels: int
    layout: str
    samples_per_texel: Optional[int] = None


def write_bin(path: Path, buffer: np.ndarray, fmt: TexelFormat) -> Path:
    """Write the quantized texels with no header (little-endian, row-major)."""
    path = Path(path)
    pixels = quantize(buffer, fmt)
    pixels = pixels.astype(pixels.dtype.newbyteorder("<"), copy=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pixels.tobytes())
    return path


_PNG_MODES = {1: "L", 3: "RGB", 4: "RGBA"}


def to_png_pixels(buffer: np.ndarray) -> np.ndarray:
    """8-bit pixels for PNG; 2-channel tables get a zero blue channel."""
    pixels = quantize(buffer, TexelFormat.UNORM8)
    channels = pixels.shape[2]
    if channels == 2:
        blue = np.zeros(pixels.shape[:2] + (1,), dtype=np.uint8)
        pixels = np.concatenate([pixels, blue], axis=2)
    elif channels not in _PNG_MODES:
        raise UnsupportedFormatError(f"Cannot store {channels}-channel table as PNG")
    return pixels


def write_png(path: Path, buffer: np.ndarray) -> Path:
    path = Path(path)
    pixels = to_png_pixels(buffer)
    if pixels.shape[2] == 1:
        pixels = pixels[:, :, 0]
    # Mode is inferred from shape: L, RGB or RGBA.
    img = Image.fromarray(pixels)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(path))
    return path


def write_manifest(output_dir: Path, entries: Iterable[ManifestEntry]) -> Path:
    """Write manifest.json with metadata about the generated tables."""
    output_dir = Path(output_dir)
    manifest = {"tables": [asdict(e) for e in entries]}
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return manifest_path
