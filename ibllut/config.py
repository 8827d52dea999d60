"""Defaults and batch job files.

A job file is JSON of the form::

    {
      "output_dir": "out",
      "tables": [
        {"kind": "environment_brdf", "width": 256, "samples": 1024,
         "format": "float16", "output": "brdf_lut.dds"},
        {"kind": "equirect_to_cube_unwrap", "width": 512, "height": 256}
      ]
    }

Missing fields fall back to the defaults below.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ibllut.export.formats import TexelFormat, UnsupportedFormatError
from ibllut.raster.tables import SAMPLED_KINDS, TableDescriptor, TableKind
from ibllut.validation import LookupTableError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_LUT_SIZE = 256
DEFAULT_SAMPLE_COUNT = 1024
DEFAULT_MAP_SIZE = 256

DEFAULT_LUT_FILE = "lut.dds"
DEFAULT_HAMMERSLEY_FILE = "hammersley_y.dds"

DEFAULT_FORMAT = TexelFormat.FLOAT32
DEFAULT_CONTAINER = "dds"
CONTAINERS = ("dds", "bin", "png")


class ConfigError(LookupTableError):
    pass


@dataclass
class TableJob:
    kind: TableKind
    width: int
    height: Optional[int] = None
    samples: int = DEFAULT_SAMPLE_COUNT
    channels: Optional[int] = None
    format: TexelFormat = DEFAULT_FORMAT
    container: str = DEFAULT_CONTAINER
    output: Optional[str] = None

    def descriptor(self) -> TableDescriptor:
        return TableDescriptor.for_kind(
            self.kind, self.width, self.height,
            sample_count=self.samples if self.kind in SAMPLED_KINDS else None,
            channels=self.channels,
        )

    @property
    def file_name(self) -> str:
        if self.output:
            return self.output
        return f"{self.kind.value}.{self.container}"


def default_size(kind: TableKind) -> int:
    if kind is TableKind.ENVIRONMENT_BRDF:
        return DEFAULT_LUT_SIZE
    if kind is TableKind.HAMMERSLEY_Y:
        return DEFAULT_SAMPLE_COUNT
    return DEFAULT_MAP_SIZE


def container_for(output: Optional[str], container: Optional[str]) -> str:
    if container is None and output:
        container = Path(output).suffix.lstrip(".").lower() or None
    container = container or DEFAULT_CONTAINER
    if container not in CONTAINERS:
        raise ConfigError(
            f"Unknown container '{container}' (expected one of: {', '.join(CONTAINERS)})"
        )
    return container


def job_from_dict(data: dict) -> TableJob:
    if not isinstance(data, dict):
        raise ConfigError(f"Table entry must be an object, got {type(data).__name__}")
    if "kind" not in data:
        raise ConfigError("Table entry is missing 'kind'")

    try:
        kind = TableKind.parse(str(data["kind"]))
    except ValueError as e:
        raise ConfigError(str(e)) from None

    try:
        fmt = TexelFormat.parse(str(data.get("format", DEFAULT_FORMAT.value)))
    except UnsupportedFormatError as e:
        raise ConfigError(str(e)) from None

    output = data.get("output")
    container = container_for(output, data.get("container"))

    samples = data.get("samples")
    if samples is None:
        if kind is TableKind.HAMMERSLEY_Y:
            samples = data.get("width", DEFAULT_SAMPLE_COUNT)
        else:
            samples = DEFAULT_SAMPLE_COUNT
    width = data.get("width")
    if width is None:
        width = samples if kind is TableKind.HAMMERSLEY_Y else default_size(kind)

    unknown = set(data) - {"kind", "width", "height", "samples", "channels",
                           "format", "container", "output"}
    if unknown:
        raise ConfigError(f"Unknown table field(s): {', '.join(sorted(unknown))}")

    return TableJob(
        kind=kind,
        width=width,
        height=data.get("height"),
        samples=samples,
        channels=data.get("channels"),
        format=fmt,
        container=container,
        output=output,
    )


def load_jobs(path: Path) -> tuple[Path | None, List[TableJob]]:
    """Parse a job file. Returns (output_dir or None, jobs)."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Job file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from None

    if not isinstance(data, dict) or not isinstance(data.get("tables"), list):
        raise ConfigError(f"{path}: expected an object with a 'tables' list")

    jobs = [job_from_dict(entry) for entry in data["tables"]]
    output_dir = data.get("output_dir")
    if output_dir is not None:
        output_dir = Path(output_dir)
        if not output_dir.is_absolute():
            output_dir = path.parent / output_dir
    return output_dir, jobs
