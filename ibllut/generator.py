"""Top-level table generation: rasterize, quantize, write."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from ibllut.config import TableJob
from ibllut.export.dds import write_dds
from ibllut.export.formats import dxgi_format
from ibllut.export.writers import ManifestEntry, write_bin, write_manifest, write_png
from ibllut.raster.tables import LAYOUTS, TableKind, rasterize


def generate_table(job: TableJob, output_dir: Path, verbose: bool = True) -> ManifestEntry:
    desc = job.descriptor()
    table = rasterize(desc, verbose=verbose)

    path = Path(output_dir) / job.file_name
    if job.container == "dds":
        write_dds(path, table, job.format)
        fmt = job.format.value
    elif job.container == "bin":
        write_bin(path, table, job.format)
        fmt = job.format.value
    elif job.container == "png":
        write_png(path, table)
        fmt = "unorm8"
    else:
        raise ValueError(f"Unknown container: {job.container}")

    if verbose:
        print(f"Wrote {path}")

    return ManifestEntry(
        file=job.file_name,
        kind=desc.kind.value,
        format=fmt,
        width=desc.width,
        height=desc.height,
        channels=desc.channel_count,
        layout=LAYOUTS[desc.kind],
        samples_per_texel=(desc.sample_count
                           if desc.kind is TableKind.ENVIRONMENT_BRDF else None),
    )


def generate_tables(jobs: Iterable[TableJob], output_dir: Path,
                    manifest: bool = False, verbose: bool = True) -> List[ManifestEntry]:
    """Generate every job in order.

    Descriptors and DDS format/channel pairings are validated before any
    table is computed, so a bad job leaves nothing on disk.
    """
    jobs = list(jobs)
    for job in jobs:
        desc = job.descriptor()
        if job.container == "dds":
            dxgi_format(job.format, desc.channel_count)

    output_dir = Path(output_dir)
    entries = [generate_table(job, output_dir, verbose) for job in jobs]

    if manifest:
        manifest_path = write_manifest(output_dir, entries)
        if verbose:
            print(f"Wrote {manifest_path}")
    return entries
