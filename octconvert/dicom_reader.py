"""DICOM reader for OCT scans.

Reads ophthalmic tomography (OPT) objects, and any other single-channel
DICOM image, into an :class:`~octconvert.octdata.OCT` hierarchy with one
patient, one study and one series.  Each frame becomes one B-scan.
"""

import logging
from pathlib import Path

import numpy as np
import pydicom
from pydicom.errors import InvalidDicomError
from pydicom.valuerep import PersonName

from octconvert.config import OPT_SOP_CLASS_UID, FileReadOptions
from octconvert.errors import OctReadError
from octconvert.octdata import OCT
from octconvert.utils import normalize_windows_path, parse_dicom_date, parse_int_id

logger = logging.getLogger(__name__)


def is_loadable(path: Path) -> bool:
    """Return True if *path* is a DICOM file carrying image dimensions."""
    try:
        ds = pydicom.dcmread(normalize_windows_path(path), stop_before_pixels=True)
    except InvalidDicomError:
        return False
    except Exception as exc:
        logger.debug("Could not inspect %s: %s", path, exc)
        return False

    if "Rows" not in ds or "Columns" not in ds:
        logger.debug("No image in DICOM file %s", path)
        return False
    return True


def read(path: Path, options: FileReadOptions) -> OCT:
    """Decode the DICOM file at *path*.

    Parameters
    ----------
    path : Path
        DICOM file to read.
    options : FileReadOptions
        ``fill_empty_pixel_white`` turns zero-valued padding pixels white.

    Returns
    -------
    OCT
        Hierarchy holding the file's patient, study and series.

    Raises
    ------
    OctReadError
        If the file is not DICOM, has no pixel data, or its image header
        or pixel data cannot be decoded.
    """
    try:
        ds = pydicom.dcmread(normalize_windows_path(path))
    except InvalidDicomError as exc:
        raise OctReadError(path, f"not a DICOM file ({exc})") from exc
    except Exception as exc:
        raise OctReadError(path, str(exc)) from exc

    try:
        return _build_oct(path, ds, options)
    except OctReadError:
        raise
    except Exception as exc:
        raise OctReadError(path, f"unusable image header ({exc})") from exc


def _build_oct(path: Path, ds: pydicom.Dataset, options: FileReadOptions) -> OCT:
    if "PixelData" not in ds:
        raise OctReadError(path, "no pixel data")
    # Present-but-empty elements read back as None
    if int(ds.get("SamplesPerPixel") or 1) != 1:
        raise OctReadError(path, "colour images are not supported")

    try:
        pixels = ds.pixel_array
    except Exception as exc:
        raise OctReadError(path, f"pixel data could not be decoded ({exc})") from exc

    if pixels.ndim == 2:
        pixels = pixels[np.newaxis]
    if options.fill_empty_pixel_white and np.issubdtype(pixels.dtype, np.integer):
        pixels = np.where(pixels == 0, np.iinfo(pixels.dtype).max, pixels).astype(pixels.dtype)

    if ds.get("SOPClassUID") != OPT_SOP_CLASS_UID:
        logger.debug("%s is not an OPT object, reading frames as B-scans", path)

    oct_data = OCT()
    patient = oct_data.get_patient(1)
    patient.id = str(ds.get("PatientID", "") or "")
    name = PersonName(str(ds.get("PatientName", "") or ""))
    patient.surname = name.family_name
    patient.forename = name.given_name
    patient.title = name.name_prefix
    patient.sex = str(ds.get("PatientSex", "") or "")
    patient.birthdate = parse_dicom_date(ds.get("PatientBirthDate"))

    study_id = parse_int_id(ds.get("StudyID"))
    study = patient.get_study(study_id)
    study.description = str(ds.get("StudyDescription", "") or "")
    study.study_date = parse_dicom_date(ds.get("StudyDate"))

    series_id = parse_int_id(ds.get("SeriesNumber"))
    series = study.get_series(series_id)
    series.description = str(ds.get("SeriesDescription", "") or "")
    series.laterality = str(ds.get("ImageLaterality", "") or ds.get("Laterality", "") or "")
    for frame in pixels:
        series.add_bscan(np.ascontiguousarray(frame))

    logger.debug(
        "Read %s: patient %r, study %d, series %d, %d B-scans",
        path, patient.id, study_id, series_id, len(series.bscans),
    )
    return oct_data
