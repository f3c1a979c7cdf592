"""Encoders for the ``xoct``, ``octbin`` and ``img`` output formats.

Each writer raises on failure; :func:`octconvert.octfileio.write_file`
turns failures into a ``False`` return value.
"""

import io
import logging
import struct
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

import numpy as np

from octconvert.config import OCTBIN_MAGIC, XOCT_XML_MEMBER, FileWriteOptions
from octconvert.errors import OctWriteError
from octconvert.octdata import OCT
from octconvert.utils import normalize_windows_path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Hierarchy description
# ---------------------------------------------------------------------------

def _text_child(parent: ET.Element, tag: str, text: str) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = text
    return el


def describe_oct(oct_data: OCT) -> tuple[ET.Element, list[tuple[str, np.ndarray]]]:
    """Build the XML description of *oct_data*.

    Returns the ``<OCT>`` root element and the B-scans in document order,
    each paired with the member name its ``<BScan>`` element refers to.
    """
    root = ET.Element("OCT")
    bscans: list[tuple[str, np.ndarray]] = []

    for patient_key, patient in oct_data:
        if patient is None:
            continue
        pat_el = ET.SubElement(root, "Patient", id=str(patient_key))
        _text_child(pat_el, "ID", patient.id)
        _text_child(pat_el, "Surname", patient.surname)
        _text_child(pat_el, "Forename", patient.forename)
        _text_child(pat_el, "Title", patient.title)
        _text_child(pat_el, "Sex", patient.sex)
        _text_child(pat_el, "Birthdate", patient.birthdate.isoformat())

        for study_key, study in patient:
            if study is None:
                continue
            study_el = ET.SubElement(pat_el, "Study", id=str(study_key))
            _text_child(study_el, "Description", study.description)
            _text_child(study_el, "StudyDate", study.study_date.isoformat())

            for series_key, series in study:
                if series is None:
                    continue
                series_el = ET.SubElement(study_el, "Series", id=str(series_key))
                _text_child(series_el, "Laterality", series.laterality)
                _text_child(series_el, "Description", series.description)

                for index, image in enumerate(series.bscans):
                    member = f"pat{patient_key}_study{study_key}_series{series_key}_bscan{index:04d}"
                    ET.SubElement(
                        series_el, "BScan",
                        index=str(index),
                        member=member,
                        rows=str(image.shape[0]),
                        columns=str(image.shape[1]),
                        dtype=image.dtype.str,
                    )
                    bscans.append((member, image))

    return root, bscans


def _xml_bytes(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _little_endian(image: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(image, dtype=image.dtype.newbyteorder("<"))


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------

def write_xoct(path: Path, oct_data: OCT, options: FileWriteOptions) -> None:
    """Write a ZIP container with ``patdata.xml`` and one ``.npy`` per B-scan."""
    root, bscans = describe_oct(oct_data)
    with zipfile.ZipFile(normalize_windows_path(path), "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(XOCT_XML_MEMBER, _xml_bytes(root))
        for member, image in bscans:
            buffer = io.BytesIO()
            np.save(buffer, image, allow_pickle=False)
            zf.writestr(f"{member}.npy", buffer.getvalue())
    logger.debug("Wrote %d B-scans to %s", len(bscans), path)


def write_octbin(path: Path, oct_data: OCT, options: FileWriteOptions) -> None:
    """Write B-scan voxels as one little-endian binary stream.

    Flat files start with ``OCTBIN_MAGIC``, a uint32 XML length and the XML
    description, followed by the voxels.  Otherwise the XML is written to
    ``<path>.xml`` and the ``.octbin`` holds voxels only.
    """
    root, bscans = describe_oct(oct_data)

    # Voxel offsets are relative to the start of the voxel block
    offset = 0
    for bscan_el, (_, image) in zip(root.iter("BScan"), bscans):
        bscan_el.set("offset", str(offset))
        offset += image.nbytes
    xml_data = _xml_bytes(root)

    with open(normalize_windows_path(path), "wb") as fh:
        if options.octbin_flat:
            fh.write(OCTBIN_MAGIC)
            fh.write(struct.pack("<I", len(xml_data)))
            fh.write(xml_data)
        for _, image in bscans:
            fh.write(_little_endian(image).tobytes())

    if not options.octbin_flat:
        sidecar = path.with_name(path.name + ".xml")
        sidecar.write_bytes(xml_data)
        logger.debug("Wrote octbin description to %s", sidecar)


def _to_uint8(volume: np.ndarray) -> np.ndarray:
    if volume.dtype == np.uint8:
        return volume
    volume = volume.astype(np.float64)
    low = volume.min()
    span = volume.max() - low
    if span <= 0:
        return np.zeros(volume.shape, dtype=np.uint8)
    return np.round((volume - low) * 255.0 / span).astype(np.uint8)


def write_img(path: Path, oct_data: OCT, options: FileWriteOptions) -> None:
    """Write the B-scans of the first series that has any as a raw 8-bit volume.

    Raises
    ------
    OctWriteError
        If no series holds any B-scan, or the B-scans differ in size.
    """
    for _, _, series in oct_data.iter_series():
        if series.bscans:
            break
    else:
        raise OctWriteError("no B-scans to write")

    shapes = {image.shape for image in series.bscans}
    if len(shapes) != 1:
        raise OctWriteError(f"B-scans differ in size: {sorted(shapes)}")

    volume = _to_uint8(series.volume())
    with open(normalize_windows_path(path), "wb") as fh:
        volume.tofile(fh)
    logger.debug("Wrote %s volume %s to %s", volume.dtype, volume.shape, path)


WRITERS = {
    ".xoct": write_xoct,
    ".octbin": write_octbin,
    ".img": write_img,
}
