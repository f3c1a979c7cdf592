"""Patient identity removal for decoded OCT scans.

Names and title are cleared; the birthdate is generalised to the first of
January of the same year so age at scan time stays usable.  Patient IDs,
study/series keys and image data are left untouched.
"""

import dataclasses
import logging

from octconvert.octdata import OCT

logger = logging.getLogger(__name__)


def anonymise_oct(oct_data: OCT) -> None:
    """Strip identifying fields from every patient in *oct_data*, in place."""
    for key, patient in oct_data:
        if patient is None:
            continue

        patient.surname = ""
        patient.forename = ""
        patient.title = ""

        # An unset birthdate stays unset
        if not patient.birthdate.is_empty:
            patient.birthdate = dataclasses.replace(patient.birthdate, day=1, month=1)

        logger.debug("Anonymised patient %s", key)
