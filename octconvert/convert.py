"""Batch conversion of OCT scan files.

Each input path is either converted directly or, for a directory, searched
recursively for loadable scan files.  Every file goes through:

1. Decode with the registered readers
2. Derive the destination name from patient / study / series
3. Skip if the destination already exists
4. Optionally anonymise the patient data
5. Encode to the selected output format

A failure on one file is logged and reported in its
:class:`ConversionResult`; the batch always continues with the next file.
"""

import argparse
import logging
import sys
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from octconvert.anonymise_oct import anonymise_oct
from octconvert.config import (
    ConversionOptions,
    FileReadOptions,
    FileWriteOptions,
    OutputFormat,
    setup_logging,
    suffix_for,
)
from octconvert.errors import OctReadError
from octconvert.filename import derive_filename
from octconvert.octfileio import is_loadable, open_file, write_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-file result
# ---------------------------------------------------------------------------

class ConversionOutcome(str, Enum):
    CONVERTED = "converted"
    DESTINATION_EXISTS = "destination_exists"
    DECODE_FAILED = "decode_failed"
    WRITE_FAILED = "write_failed"


@dataclass
class ConversionResult:
    """Outcome of converting a single source file."""

    source: Path
    outcome: ConversionOutcome
    destination: Optional[Path] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is ConversionOutcome.CONVERTED


# ---------------------------------------------------------------------------
# Single file
# ---------------------------------------------------------------------------

def destination_for(source: Path, stem: str, options: ConversionOptions) -> Path:
    """Return the output path for *stem*, next to *source* unless overridden."""
    directory = options.output_path if options.output_path is not None else source.parent
    return Path(directory) / (stem + options.suffix)


def convert_file(filename: Path, options: ConversionOptions) -> ConversionResult:
    """Convert one scan file according to *options*.

    Never raises for per-file problems; see :class:`ConversionOutcome`.
    """
    filename = Path(filename)

    try:
        oct_data = open_file(filename, options.read_options)
    except OctReadError as exc:
        logger.error("Error: %s", exc)
        return ConversionResult(filename, ConversionOutcome.DECODE_FAILED, message=str(exc))

    stem = derive_filename(oct_data, filename, options.add_old_filename)
    dest = destination_for(filename, stem, options)

    if dest.exists():
        logger.error("Error: target file exists: %s", dest)
        return ConversionResult(
            filename, ConversionOutcome.DESTINATION_EXISTS, dest, "target file exists",
        )

    logger.info("Target file: %s", dest)

    if options.anonymise:
        anonymise_oct(oct_data)

    if not write_file(dest, oct_data, options.write_options):
        logger.error("Error: write file %s not successful", dest)
        return ConversionResult(
            filename, ConversionOutcome.WRITE_FAILED, dest, "write not successful",
        )

    return ConversionResult(filename, ConversionOutcome.CONVERTED, dest)


# ---------------------------------------------------------------------------
# Directory traversal
# ---------------------------------------------------------------------------

def iter_candidate_files(
    root: Path,
    output_format: OutputFormat,
    loadable: Optional[Callable[[Path], bool]] = None,
) -> Iterator[Path]:
    """Yield the files under *root* that should be converted.

    A *root* that is not a directory is yielded as is.  Otherwise every file
    in the tree is yielded, in walk order, unless it already carries the
    output suffix or *loadable* (default :func:`is_loadable`) rejects it.
    """
    root = Path(root)
    if not root.is_dir():
        yield root
        return

    loadable = loadable if loadable is not None else is_loadable
    output_suffix = suffix_for(output_format)
    for path in root.rglob("*"):
        if path.is_dir():
            continue
        if path.suffix == output_suffix:
            logger.debug("Skipping %s, already in output format", path)
            continue
        if loadable(path):
            yield path
        else:
            logger.debug("Skipping %s, not loadable", path)


def convert_files_from_dir(directory: Path, options: ConversionOptions) -> list[ConversionResult]:
    """Convert every candidate file found under *directory*."""
    return [
        convert_file(path, options)
        for path in iter_candidate_files(directory, options.output_format)
    ]


def convert_paths(paths: Iterable[Path], options: ConversionOptions) -> list[ConversionResult]:
    """Convert files and directory trees in the order given."""
    results: list[ConversionResult] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            results.extend(convert_files_from_dir(path, options))
        else:
            results.append(convert_file(path, options))
    return results


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 and full usage on errors."""

    def error(self, message: str) -> None:
        self.exit(1, f"ERROR: {message}\n\n{self.format_help()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="octconvert",
        description="Convert all files in octpath to the outputformat.",
    )
    parser.add_argument("octpath", type=Path, nargs="+", help="one or more oct scans or directories")
    parser.add_argument(
        "--addOldFilename", action="store_true", dest="add_old_filename",
        help="add old filename at the end",
    )
    parser.add_argument(
        "--outputPath", type=Path, dest="output_path", default=None,
        help="put files in this folder",
    )
    parser.add_argument(
        "-a", "--anonymising", action="store_true", dest="anonymise",
        help="strip patient name",
    )
    parser.add_argument(
        "-f", "--outputformat", default=OutputFormat.XOCT.value,
        choices=[f.value for f in OutputFormat],
        help="output format (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    """Build the run configuration from parsed arguments."""
    return ConversionOptions(
        output_format=OutputFormat(args.outputformat),
        add_old_filename=args.add_old_filename,
        anonymise=args.anonymise,
        output_path=args.output_path,
        read_options=FileReadOptions(fill_empty_pixel_white=False, register_bscans=True),
        write_options=FileWriteOptions(octbin_flat=True),
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    options = options_from_args(args)
    results = convert_paths(args.octpath, options)

    counts = Counter(r.outcome for r in results)
    print(
        f"\nProcessed {len(results)} file(s): "
        + ", ".join(f"{counts[o]} {o.value}" for o in ConversionOutcome)
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
