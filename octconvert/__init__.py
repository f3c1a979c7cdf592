"""
octconvert — Batch conversion of ophthalmic OCT scan files.

Reads OCT scans (a single file, or every loadable file under a directory
tree), optionally strips patient identity, and writes each scan to one of
the ``xoct``, ``octbin`` or ``img`` output formats under a filename derived
from the scan's own metadata.

Naming Approach
---------------
Output files are named ``<PatientID>_<StudyID>_<SeriesID>`` from the first
patient, study and series found in the scan.  Only the first entries are
consulted: a file holding several studies or series for one patient is named
after the first of them, so two such files can map to the same destination.
Pass ``--addOldFilename`` to append the source stem and keep names unique.
Existing destinations are never overwritten.

The patient ID is used in the name exactly as stored in the scan.  An ID
containing path separators or ``..`` therefore places the output below, or
outside, the chosen output directory.  Only convert scans from trusted
sources, or check their patient IDs first.
"""

__version__ = "0.1.0"
