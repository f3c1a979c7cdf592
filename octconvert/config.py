"""
Centralised configuration for the octconvert package.

Output formats, read/write option defaults, container constants, the run
options snapshot, and logging setup used across all modules.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Output format selectable with ``--outputformat``."""

    XOCT = "xoct"
    OCTBIN = "octbin"
    IMG = "img"


_EXTENSIONS = {
    OutputFormat.XOCT: ".xoct",
    OutputFormat.OCTBIN: ".octbin",
    OutputFormat.IMG: ".img",
}


def suffix_for(output_format: OutputFormat) -> str:
    """Return the filename suffix of *output_format*, e.g. ``'.xoct'``.

    Anything that is not an :class:`OutputFormat` member yields ``""``.
    """
    return _EXTENSIONS.get(output_format, "")


# ---------------------------------------------------------------------------
# Container constants
# ---------------------------------------------------------------------------
# Member name of the XML hierarchy description inside an .xoct archive.
XOCT_XML_MEMBER = "patdata.xml"

# Leading bytes of every flat .octbin file.
OCTBIN_MAGIC = b"OCTBIN\x00\x01"

# DICOM SOP class of Ophthalmic Tomography Image Storage.
OPT_SOP_CLASS_UID = "1.2.840.10008.5.1.4.1.1.77.1.5.4"

# ---------------------------------------------------------------------------
# Reader / writer options
# ---------------------------------------------------------------------------
# Directory searched by readers that load helper files at runtime.
DEFAULT_LIB_PATH = str(Path(__file__).resolve().parent)


@dataclass(frozen=True)
class FileReadOptions:
    """Options passed through to the scan readers."""

    fill_empty_pixel_white: bool = False
    register_bscans: bool = True
    lib_path: str = DEFAULT_LIB_PATH


@dataclass(frozen=True)
class FileWriteOptions:
    """Options passed through to the scan writers."""

    octbin_flat: bool = True


# ---------------------------------------------------------------------------
# Run options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionOptions:
    """Immutable configuration for one conversion run.

    Built once from the command line and passed explicitly to the path
    walker and the conversion pipeline.
    """

    output_format: OutputFormat = OutputFormat.XOCT
    add_old_filename: bool = False
    anonymise: bool = False
    output_path: Optional[Path] = None
    read_options: FileReadOptions = field(default_factory=FileReadOptions)
    write_options: FileWriteOptions = field(default_factory=FileWriteOptions)

    @property
    def suffix(self) -> str:
        return suffix_for(self.output_format)


# ---------------------------------------------------------------------------
# Logging helper
# ---------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for octconvert scripts."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
