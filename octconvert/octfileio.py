"""Reader/writer front end used by the conversion pipeline.

``is_loadable`` and ``open_file`` try the registered readers in order;
``write_file`` picks the writer from the destination suffix.
"""

import logging
from pathlib import Path
from typing import Optional

from octconvert import dicom_reader
from octconvert.config import FileReadOptions, FileWriteOptions
from octconvert.errors import OctReadError, OctWriteError
from octconvert.octdata import OCT
from octconvert.writers import WRITERS

logger = logging.getLogger(__name__)

# Each reader module provides is_loadable(path) and read(path, options).
READERS = [dicom_reader]


def is_loadable(path: Path) -> bool:
    """Return True if any registered reader accepts *path*."""
    path = Path(path)
    if not path.is_file():
        return False
    return any(reader.is_loadable(path) for reader in READERS)


def open_file(path: Path, options: Optional[FileReadOptions] = None) -> OCT:
    """Decode *path* with the first reader that accepts it.

    Raises
    ------
    OctReadError
        If the file is missing, no reader accepts it, or decoding fails.
    """
    path = Path(path)
    options = options if options is not None else FileReadOptions()
    if not path.is_file():
        raise OctReadError(path, "file does not exist")

    for reader in READERS:
        if reader.is_loadable(path):
            return reader.read(path, options)
    raise OctReadError(path, "unsupported file format")


def write_file(path: Path, oct_data: OCT, options: Optional[FileWriteOptions] = None) -> bool:
    """Encode *oct_data* to *path* in the format named by its suffix.

    Never raises; failures are logged and reported as False.
    """
    path = Path(path)
    options = options if options is not None else FileWriteOptions()

    writer = WRITERS.get(path.suffix)
    if writer is None:
        logger.error("No writer for file extension '%s': %s", path.suffix, path)
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        writer(path, oct_data, options)
    except (OSError, ValueError, OctWriteError) as exc:
        logger.error("Failed to write %s: %s", path, exc)
        return False
    return True
