"""
Shared parsing helpers for DICOM-derived scan metadata.

Used by the DICOM reader and the writers.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

from octconvert.octdata import Date

logger = logging.getLogger(__name__)

_WINDOWS_LONG_PATH_PREFIX = "\\\\?\\"


def normalize_windows_path(path: Path) -> str:
    """Return a Windows-safe path string, adding long-path prefixes if needed."""
    path_str = str(path)
    if os.name != "nt":
        return path_str
    if path_str.startswith(_WINDOWS_LONG_PATH_PREFIX):
        return path_str
    if not Path(path_str).is_absolute():
        return path_str
    if len(path_str) < 240:
        return path_str
    if path_str.startswith("\\\\"):
        unc_path = path_str.lstrip("\\")
        return f"\\\\?\\UNC\\{unc_path}"
    return f"{_WINDOWS_LONG_PATH_PREFIX}{path_str}"


# ---------------------------------------------------------------------------
# DICOM DA parsing
# ---------------------------------------------------------------------------

# DA values are YYYYMMDD; older exports sometimes use YYYY.MM.DD.
_DICOM_DATE_PATTERN = re.compile(r"^(\d{4})\.?(\d{2})\.?(\d{2})$")


def parse_dicom_date(value: Optional[str]) -> Date:
    """Convert a DICOM DA string to a :class:`Date`.

    Parameters
    ----------
    value : str or None
        Raw element value, e.g. ``"19900615"``.

    Returns
    -------
    Date
        Parsed date, or ``Date.empty()`` when the value is missing or invalid.
    """
    if not value:
        return Date.empty()

    match = _DICOM_DATE_PATTERN.match(str(value).strip())
    if not match:
        logger.warning("Could not parse DICOM date: %s", value)
        return Date.empty()

    year, month, day = (int(g) for g in match.groups())
    date = Date(year, month, day)
    try:
        date.to_date()
    except ValueError as exc:
        logger.warning("Invalid DICOM date %s: %s", value, exc)
        return Date.empty()
    return date


def parse_int_id(value, default: int = 1) -> int:
    """Return *value* as a non-negative integer key, or *default*.

    StudyID is a free-text SH element; only plain decimal values are used.
    """
    if value is None:
        return default
    text = str(value).strip()
    if not text.isdecimal():
        if text:
            logger.debug("Non-numeric identifier %r, using %d", text, default)
        return default
    return int(text)
