"""Destination filename derivation for converted OCT scans."""

import logging
from pathlib import Path

from octconvert.octdata import OCT

logger = logging.getLogger(__name__)

UNKNOWN_PATIENT_ID = "unknown"


def derive_filename(oct_data: OCT, source_path: Path, add_old_filename: bool = False) -> str:
    """Return the destination stem for *oct_data* read from *source_path*.

    The name is ``<PatientID>_<StudyID>_<SeriesID>`` built from the first
    patient, its first study and that study's first series.  Missing levels
    degrade to a shorter name instead of raising:

    - no patient, or a patient without studies -> source file stem
    - empty patient ID -> ``"unknown"``
    - study without series -> patient ID alone

    Parameters
    ----------
    oct_data : OCT
        Decoded scan hierarchy.
    source_path : Path
        File the hierarchy was read from.
    add_old_filename : bool
        Append ``_<source stem>`` to a full ``ID_study_series`` name.

    Returns
    -------
    str
        Filename without directory or extension.
    """
    old_name = Path(source_path).stem

    first_patient = oct_data.first()
    if first_patient is None:
        logger.debug("No patient in %s, keeping source name", source_path)
        return old_name

    _, patient = first_patient
    first_study = patient.first() if patient is not None else None
    if first_study is None:
        return old_name

    study_id, study = first_study
    dest_name = patient.id or UNKNOWN_PATIENT_ID

    first_series = study.first() if study is not None else None
    if first_series is None:
        return dest_name

    series_id, _ = first_series
    dest_name += f"_{study_id:d}_{series_id:d}"
    if add_old_filename:
        dest_name += f"_{old_name}"

    return dest_name
