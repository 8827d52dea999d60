"""Command-line interface for the IBL lookup table generator."""

import argparse
import sys
from pathlib import Path

from ibllut import __version__
from ibllut.config import (
    CONTAINERS, DEFAULT_HAMMERSLEY_FILE, DEFAULT_LUT_FILE, DEFAULT_LUT_SIZE,
    DEFAULT_SAMPLE_COUNT, TableJob, container_for, default_size, load_jobs,
)
from ibllut.export.formats import TexelFormat
from ibllut.generator import generate_tables
from ibllut.raster.tables import TableKind
from ibllut.validation import LookupTableError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ibllut",
        description="Precompute IBL lookup tables: split-sum environment BRDF, "
                    "Hammersley Y, and eye/equirectangular/cube-unwrap mappings.",
    )
    parser.add_argument(
        "lut_path", nargs="?", default=DEFAULT_LUT_FILE,
        help=f"Environment BRDF output file (default: {DEFAULT_LUT_FILE})",
    )
    parser.add_argument(
        "hammersley_path", nargs="?", default=DEFAULT_HAMMERSLEY_FILE,
        help=f"Hammersley Y output file (default: {DEFAULT_HAMMERSLEY_FILE})",
    )
    parser.add_argument(
        "--size", type=int, default=DEFAULT_LUT_SIZE,
        help=f"Environment BRDF table width and height (default: {DEFAULT_LUT_SIZE})",
    )
    parser.add_argument(
        "--samples", type=int, default=DEFAULT_SAMPLE_COUNT,
        help=f"Hammersley sample count (default: {DEFAULT_SAMPLE_COUNT})",
    )
    parser.add_argument(
        "--table", type=str, metavar="KIND",
        choices=[k.value for k in TableKind],
        help="Generate a single table of this kind instead of the default pair",
    )
    parser.add_argument("--width", type=int, help="Table width (with --table)")
    parser.add_argument("--height", type=int, help="Table height (with --table, default: width)")
    parser.add_argument(
        "--channels", type=int, choices=[3, 4],
        help="Channel count for equirect_to_eye tables (default: 4)",
    )
    parser.add_argument(
        "--format", type=str, default=TexelFormat.FLOAT32.value,
        choices=[f.value for f in TexelFormat],
        help="Texel storage format (default: float32)",
    )
    parser.add_argument(
        "--container", type=str, choices=list(CONTAINERS),
        help="Output container (default: from the file suffix, else dds)",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=None,
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--jobs", type=Path, metavar="FILE",
        help="JSON job file listing the tables to generate",
    )
    parser.add_argument(
        "--manifest", action="store_true",
        help="Write manifest.json next to the generated tables",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress progress output",
    )
    parser.add_argument(
        "--version", action="version", version=f"ibllut {__version__}"
    )
    return parser


def _default_jobs(args) -> list[TableJob]:
    fmt = TexelFormat.parse(args.format)
    return [
        TableJob(
            kind=TableKind.ENVIRONMENT_BRDF,
            width=args.size,
            samples=args.samples,
            format=fmt,
            container=container_for(args.lut_path, args.container),
            output=args.lut_path,
        ),
        TableJob(
            kind=TableKind.HAMMERSLEY_Y,
            width=args.samples,
            samples=args.samples,
            format=fmt,
            container=container_for(args.hammersley_path, args.container),
            output=args.hammersley_path,
        ),
    ]


def _single_job(args) -> TableJob:
    kind = TableKind.parse(args.table)
    if kind is TableKind.HAMMERSLEY_Y:
        width = args.width or args.samples
        samples = width
    elif kind is TableKind.ENVIRONMENT_BRDF:
        width = args.width or args.size
        samples = args.samples
    else:
        width = args.width or default_size(kind)
        samples = args.samples
    container = args.container or "dds"
    return TableJob(
        kind=kind,
        width=width,
        height=args.height,
        samples=samples,
        channels=args.channels,
        format=TexelFormat.parse(args.format),
        container=container,
        output=f"{kind.value}.{container}",
    )


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = not args.quiet

    try:
        if args.jobs:
            job_dir, jobs = load_jobs(args.jobs)
            output_dir = args.output_dir or job_dir or Path.cwd()
        elif args.table:
            jobs = [_single_job(args)]
            output_dir = args.output_dir or Path.cwd()
        else:
            jobs = _default_jobs(args)
            output_dir = args.output_dir or Path.cwd()

        if verbose:
            print("=" * 60)
            print(f"  IBL lookup tables: {len(jobs)} table(s)")
            print(f"  Output directory:  {output_dir}")
            print("=" * 60)

        generate_tables(jobs, output_dir, manifest=args.manifest, verbose=verbose)
    except (LookupTableError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if verbose:
        print("\nDone.")
