"""Lookup table rasterization.

Each table kind fixes how a pixel maps to kernel inputs, which kernel runs,
and how many channels come out. Every table is returned as a float64 array
of shape (height, width, channels), row-major, values in [0, 1].
"""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from ibllut.brdf.integrate import accumulate_brdf, ggx_half_vectors
from ibllut.mapping.cube import equirect_uv_to_cube_uv, eye_to_cube_uv
from ibllut.mapping.equirect import equirect_uv_to_eye, eye_to_equirect_uv
from ibllut.sampling.hammersley import hammersley_sequence
from ibllut.validation import (
    RangeValidationError, validate_count, validate_power_of_two,
)


class TableKind(enum.Enum):
    ENVIRONMENT_BRDF = "environment_brdf"
    EYE_TO_EQUIRECT = "eye_to_equirect"
    EQUIRECT_TO_EYE = "equirect_to_eye"
    EYE_TO_CUBE_UNWRAP = "eye_to_cube_unwrap"
    EQUIRECT_TO_CUBE_UNWRAP = "equirect_to_cube_unwrap"
    HAMMERSLEY_Y = "hammersley_y"

    @classmethod
    def parse(cls, name: str) -> "TableKind":
        key = name.strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value == key or kind.name.lower() == key:
                return kind
        choices = ", ".join(k.value for k in cls)
        raise ValueError(f"Unknown table kind '{name}' (expected one of: {choices})")


# Kinds whose values come from Hammersley-sequence consumption
SAMPLED_KINDS = frozenset({TableKind.ENVIRONMENT_BRDF, TableKind.HAMMERSLEY_Y})

_CHANNELS = {
    TableKind.ENVIRONMENT_BRDF: (2,),
    TableKind.EYE_TO_EQUIRECT: (2,),
    TableKind.EQUIRECT_TO_EYE: (3, 4),
    TableKind.EYE_TO_CUBE_UNWRAP: (2,),
    TableKind.EQUIRECT_TO_CUBE_UNWRAP: (2,),
    TableKind.HAMMERSLEY_Y: (1,),
}

# Human-readable axis description, recorded in manifests
LAYOUTS = {
    TableKind.ENVIRONMENT_BRDF: "row-major, row=roughness (0..1), col=NdotV (0..1), RG=(scale, bias)",
    TableKind.EYE_TO_EQUIRECT: "row-major, row=eye Y (-1..1), col=eye Z (-1..1), RG=equirect UV",
    TableKind.EQUIRECT_TO_EYE: "row-major, row=equirect V, col=equirect U, RGB=(eye+1)/2, A=1",
    TableKind.EYE_TO_CUBE_UNWRAP: "row-major, row=eye Z (-1..1), col=eye X (-1..1), RG=cube unwrap UV",
    TableKind.EQUIRECT_TO_CUBE_UNWRAP: "row-major, row=equirect V, col=equirect U, RG=cube unwrap UV",
    TableKind.HAMMERSLEY_Y: "single row, col=sample index, R=Hammersley Y",
}


def default_channels(kind: TableKind) -> int:
    return _CHANNELS[kind][-1]


@dataclass(frozen=True)
class TableDescriptor:
    kind: TableKind
    width: int
    height: int
    sample_count: Optional[int] = None
    channels: Optional[int] = None

    @classmethod
    def for_kind(cls, kind: TableKind, width: int, height: int | None = None,
                 sample_count: int | None = None,
                 channels: int | None = None) -> "TableDescriptor":
        if kind is TableKind.HAMMERSLEY_Y:
            # One texel per sample.
            if sample_count is None:
                sample_count = width
            elif width != sample_count:
                raise RangeValidationError(
                    "width", width,
                    message=f"Hammersley Y tables hold one texel per sample: `width` "
                            f"({width}) must equal `sample_count` ({sample_count}).",
                )
            width, height = sample_count, 1
        elif height is None:
            height = width
        desc = cls(kind, width, height, sample_count, channels)
        desc.validate()
        return desc

    @property
    def channel_count(self) -> int:
        return self.channels if self.channels is not None else default_channels(self.kind)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.height, self.width, self.channel_count)

    def validate(self) -> None:
        if self.kind in SAMPLED_KINDS:
            validate_power_of_two(self.width, "width")
            validate_power_of_two(self.height, "height")
        else:
            validate_count(self.width, "width")
            validate_count(self.height, "height")

        if self.kind is TableKind.ENVIRONMENT_BRDF:
            if self.sample_count is None:
                raise RangeValidationError(
                    "sample_count", None,
                    message="`sample_count` is required for environment BRDF tables.",
                )
            validate_count(self.sample_count, "sample_count")
        elif self.kind is TableKind.HAMMERSLEY_Y:
            if self.height != 1 or self.sample_count != self.width:
                raise RangeValidationError(
                    "sample_count", self.sample_count,
                    message="Hammersley Y tables are one row of `sample_count` texels.",
                )

        allowed = _CHANNELS[self.kind]
        if self.channel_count not in allowed:
            raise RangeValidationError(
                "channels", self.channel_count, min(allowed), max(allowed),
                message=f"{self.kind.value} tables support {', '.join(map(str, allowed))} "
                        f"channel(s), got {self.channel_count}.",
            )


def _centered(i: int, n: int) -> float:
    """Pixel centre mapped to [0, 1]."""
    return (i + 0.5) / n


def _signed(i: int, n: int) -> float:
    """Pixel centre mapped linearly to [-1, 1]."""
    return (i * 2.0 + 1.0) / n - 1.0


def _clamp01(x: float) -> float:
    return min(max(0.0, x), 1.0)


class _Progress:
    """Prints roughly every 5% of rows when enabled."""

    def __init__(self, label: str, total_rows: int, enabled: bool):
        self.label = label
        self.total = total_rows
        self.enabled = enabled
        self.interval = max(total_rows // 20, 1)
        self.t0 = time.time()

    def start(self, desc: TableDescriptor) -> None:
        if self.enabled:
            extra = f", {desc.sample_count} samples" if desc.sample_count else ""
            print(f"\n[{self.label}] Generating {desc.width}x{desc.height} "
                  f"({desc.channel_count} ch{extra})...")

    def row_done(self, row: int) -> None:
        done = row + 1
        if self.enabled and done % self.interval == 0 and done < self.total:
            pct = done / self.total * 100
            print(f"  Progress: {pct:.0f}% ({done}/{self.total} rows), "
                  f"elapsed: {time.time() - self.t0:.1f}s")

    def finish(self) -> None:
        if self.enabled:
            print(f"  [{self.label}] complete: {time.time() - self.t0:.1f}s")


def _rasterize_brdf(desc: TableDescriptor, out: np.ndarray, progress: _Progress) -> None:
    for y in range(desc.height):
        roughness = _centered(y, desc.height)
        # Half vectors depend on roughness only; reuse them for the whole row.
        half_vectors = ggx_half_vectors(roughness, desc.sample_count)
        for x in range(desc.width):
            nv_dot = _centered(x, desc.width)
            scale, bias = accumulate_brdf(roughness, nv_dot, half_vectors, desc.sample_count)
            out[y, x, 0] = _clamp01(scale)
            out[y, x, 1] = _clamp01(bias)
        progress.row_done(y)


def _rasterize_uv(desc: TableDescriptor, out: np.ndarray, progress: _Progress,
                  axis: Callable[[int, int], float],
                  func: Callable[[float, float], Tuple[float, float]]) -> None:
    for y in range(desc.height):
        b = axis(y, desc.height)
        for x in range(desc.width):
            a = axis(x, desc.width)
            u, v = func(a, b)
            out[y, x, 0] = _clamp01(u)
            out[y, x, 1] = _clamp01(v)
        progress.row_done(y)


def _eye_to_equirect(eye_z: float, eye_y: float) -> Tuple[float, float]:
    return eye_to_equirect_uv(eye_y, eye_z)


def _rasterize_equirect_to_eye(desc: TableDescriptor, out: np.ndarray,
                               progress: _Progress) -> None:
    for y in range(desc.height):
        v = _centered(y, desc.height)
        for x in range(desc.width):
            u = _centered(x, desc.width)
            eye = equirect_uv_to_eye(u, v)
            for c in range(3):
                out[y, x, c] = _clamp01((eye[c] + 1.0) * 0.5)
        progress.row_done(y)
    if desc.channel_count == 4:
        out[:, :, 3] = 1.0


def _rasterize_hammersley_y(desc: TableDescriptor, out: np.ndarray,
                            progress: _Progress) -> None:
    out[0, :, 0] = hammersley_sequence(desc.sample_count)[:, 1]
    progress.row_done(0)


_LABELS = {
    TableKind.ENVIRONMENT_BRDF: "BRDF LUT",
    TableKind.EYE_TO_EQUIRECT: "Eye->Equirect",
    TableKind.EQUIRECT_TO_EYE: "Equirect->Eye",
    TableKind.EYE_TO_CUBE_UNWRAP: "Eye->Cube",
    TableKind.EQUIRECT_TO_CUBE_UNWRAP: "Equirect->Cube",
    TableKind.HAMMERSLEY_Y: "Hammersley Y",
}


def rasterize(desc: TableDescriptor, verbose: bool = False) -> np.ndarray:
    """Compute every texel of the table described by ``desc``.

    Returns a new (height, width, channels) float64 array owned by the caller.
    Raises TableSizeError / RangeValidationError before any texel is computed.
    """
    desc.validate()
    out = np.zeros(desc.shape, dtype=np.float64)
    progress = _Progress(_LABELS[desc.kind], desc.height, verbose)
    progress.start(desc)

    kind = desc.kind
    if kind is TableKind.ENVIRONMENT_BRDF:
        _rasterize_brdf(desc, out, progress)
    elif kind is TableKind.EYE_TO_EQUIRECT:
        _rasterize_uv(desc, out, progress, _signed, _eye_to_equirect)
    elif kind is TableKind.EQUIRECT_TO_EYE:
        _rasterize_equirect_to_eye(desc, out, progress)
    elif kind is TableKind.EYE_TO_CUBE_UNWRAP:
        _rasterize_uv(desc, out, progress, _signed, eye_to_cube_uv)
    elif kind is TableKind.EQUIRECT_TO_CUBE_UNWRAP:
        _rasterize_uv(desc, out, progress, _centered, equirect_uv_to_cube_uv)
    elif kind is TableKind.HAMMERSLEY_Y:
        _rasterize_hammersley_y(desc, out, progress)
    else:
        raise ValueError(f"Unsupported table kind: {kind}")

    progress.finish()
    return out


# ---------------------------------------------------------------------------
# Convenience constructors
# ---------------------------------------------------------------------------

def make_brdf_table(width: int, height: int | None = None, sample_count: int = 1024,
                    verbose: bool = False) -> np.ndarray:
    """Environment BRDF table; x = N.V, y = roughness. Square when height is omitted."""
    desc = TableDescriptor.for_kind(TableKind.ENVIRONMENT_BRDF, width, height,
                                    sample_count=sample_count)
    return rasterize(desc, verbose)


def make_eye_to_equirect_table(width: int, height: int | None = None,
                               verbose: bool = False) -> np.ndarray:
    desc = TableDescriptor.for_kind(TableKind.EYE_TO_EQUIRECT, width, height)
    return rasterize(desc, verbose)


def make_equirect_to_eye_table(width: int, height: int | None = None, channels: int = 4,
                               verbose: bool = False) -> np.ndarray:
    desc = TableDescriptor.for_kind(TableKind.EQUIRECT_TO_EYE, width, height,
                                    channels=channels)
    return rasterize(desc, verbose)


def make_eye_to_cube_table(width: int, height: int | None = None,
                           verbose: bool = False) -> np.ndarray:
    desc = TableDescriptor.for_kind(TableKind.EYE_TO_CUBE_UNWRAP, width, height)
    return rasterize(desc, verbose)


def make_equirect_to_cube_table(width: int, height: int | None = None,
                                verbose: bool = False) -> np.ndarray:
    desc = TableDescriptor.for_kind(TableKind.EQUIRECT_TO_CUBE_UNWRAP, width, height)
    return rasterize(desc, verbose)


def make_hammersley_y_table(sample_count: int, verbose: bool = False) -> np.ndarray:
    """One row of Hammersley Y values, shape (1, sample_count, 1)."""
    desc = TableDescriptor.for_kind(TableKind.HAMMERSLEY_Y, sample_count,
                                    sample_count=sample_count)
    return rasterize(desc, verbose)
