"""In-memory OCT scan hierarchy: OCT -> Patient -> Study -> Series -> B-scans.

Every level keeps its children in an insertion-ordered mapping keyed by an
integer id.  ``first()`` gives the primary child, i.e. the first one added,
or ``None`` when the level is empty.
"""

import datetime
from dataclasses import dataclass, field
from typing import Generic, Iterator, Optional, TypeVar

import numpy as np

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Date:
    """Calendar date that may be unset.

    An empty date has all three parts set to 0.  A present date may have
    month/day generalised to 1 without becoming empty.
    """

    year: int = 0
    month: int = 0
    day: int = 0

    @classmethod
    def empty(cls) -> "Date":
        return cls()

    @classmethod
    def from_date(cls, value: datetime.date) -> "Date":
        return cls(value.year, value.month, value.day)

    @property
    def is_empty(self) -> bool:
        return self.year == 0 and self.month == 0 and self.day == 0

    def to_date(self) -> Optional[datetime.date]:
        """Return a ``datetime.date`` or None for an empty date."""
        if self.is_empty:
            return None
        return datetime.date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        if self.is_empty:
            return ""
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


# ---------------------------------------------------------------------------
# Ordered substructure
# ---------------------------------------------------------------------------

class Substructure(Generic[T]):
    """Insertion-ordered ``int -> child`` container shared by all levels."""

    _child_type: type

    def __init__(self) -> None:
        self._children: dict[int, Optional[T]] = {}

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[tuple[int, Optional[T]]]:
        return iter(self._children.items())

    def __contains__(self, key: int) -> bool:
        return key in self._children

    def __getitem__(self, key: int) -> Optional[T]:
        return self._children[key]

    def __setitem__(self, key: int, child: Optional[T]) -> None:
        self._children[int(key)] = child

    def get(self, key: int) -> Optional[T]:
        return self._children.get(key)

    def get_or_create(self, key: int) -> T:
        """Return the child under *key*, adding a fresh one if missing."""
        child = self._children.get(key)
        if child is None:
            child = self._child_type()
            self._children[int(key)] = child
        return child

    def first(self) -> Optional[tuple[int, Optional[T]]]:
        """Return ``(key, child)`` of the first entry, or None when empty."""
        for item in self._children.items():
            return item
        return None


# ---------------------------------------------------------------------------
# Hierarchy levels
# ---------------------------------------------------------------------------

class Series:
    """One acquisition: an ordered list of 2-D B-scan images."""

    def __init__(self, laterality: str = "", description: str = "") -> None:
        self.laterality = laterality
        self.description = description
        self.bscans: list[np.ndarray] = []

    def add_bscan(self, image: np.ndarray) -> None:
        if image.ndim != 2:
            raise ValueError(f"B-scan must be 2-D, got shape {image.shape}")
        self.bscans.append(image)

    def volume(self) -> Optional[np.ndarray]:
        """Stack the B-scans into a ``(n, rows, cols)`` array, or None."""
        if not self.bscans:
            return None
        return np.stack(self.bscans)


class Study(Substructure[Series]):
    _child_type = Series

    def __init__(self, description: str = "", study_date: Date = None) -> None:
        super().__init__()
        self.description = description
        self.study_date = study_date if study_date is not None else Date.empty()

    def get_series(self, series_id: int) -> Series:
        return self.get_or_create(series_id)


class Patient(Substructure[Study]):
    _child_type = Study

    def __init__(self, id: str = "") -> None:
        super().__init__()
        self.id = id
        self.surname = ""
        self.forename = ""
        self.title = ""
        self.sex = ""
        self.birthdate = Date.empty()

    def get_study(self, study_id: int) -> Study:
        return self.get_or_create(study_id)


class OCT(Substructure[Patient]):
    """Root of a decoded scan file; may hold no patients at all."""

    _child_type = Patient

    def get_patient(self, patient_id: int) -> Patient:
        return self.get_or_create(patient_id)

    def iter_series(self) -> Iterator[tuple[Patient, Study, Series]]:
        """Yield every present ``(patient, study, series)`` triple in order."""
        for _, patient in self:
            if patient is None:
                continue
            for _, study in patient:
                if study is None:
                    continue
                for _, series in study:
                    if series is not None:
                        yield patient, study, series
