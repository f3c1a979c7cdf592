"""Tests for octconvert.octdata — ordered hierarchy containers and Date."""

import datetime

import numpy as np
import pytest

from octconvert.octdata import OCT, Date, Patient, Series, Study


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------

class TestDate:
    def test_default_is_empty(self):
        assert Date().is_empty
        assert Date.empty().is_empty

    def test_present_date(self):
        d = Date(1990, 6, 15)
        assert not d.is_empty
        assert d.to_date() == datetime.date(1990, 6, 15)
        assert d.isoformat() == "1990-06-15"

    def test_empty_date_conversions(self):
        assert Date.empty().to_date() is None
        assert Date.empty().isoformat() == ""

    def test_from_date(self):
        assert Date.from_date(datetime.date(2001, 2, 3)) == Date(2001, 2, 3)

    def test_year_only_is_not_empty(self):
        assert not Date(1990, 1, 1).is_empty


# ---------------------------------------------------------------------------
# Substructure ordering
# ---------------------------------------------------------------------------

class TestFirstEntry:
    def test_empty_oct_has_no_first(self):
        assert OCT().first() is None

    def test_first_is_insertion_order_not_sorted(self):
        patient = Patient("P1")
        patient.get_study(9)
        patient.get_study(2)
        key, study = patient.first()
        assert key == 9
        assert isinstance(study, Study)

    def test_first_returns_stored_none(self):
        oct_data = OCT()
        oct_data[4] = None
        assert oct_data.first() == (4, None)

    def test_get_or_create_reuses_existing(self):
        study = Study()
        s1 = study.get_series(7)
        s2 = study.get_series(7)
        assert s1 is s2
        assert len(study) == 1

    def test_iteration_yields_items(self):
        oct_data = OCT()
        oct_data.get_patient(2).id = "B"
        oct_data.get_patient(1).id = "A"
        assert [(k, p.id) for k, p in oct_data] == [(2, "B"), (1, "A")]


class TestIterSeries:
    def test_skips_missing_children(self):
        oct_data = OCT()
        oct_data[1] = None
        patient = oct_data.get_patient(2)
        patient[5] = None
        series = patient.get_study(6).get_series(1)

        found = list(oct_data.iter_series())
        assert len(found) == 1
        assert found[0][2] is series


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------

class TestSeries:
    def test_volume_stacks_bscans(self):
        series = Series()
        series.add_bscan(np.zeros((4, 5), dtype=np.uint8))
        series.add_bscan(np.ones((4, 5), dtype=np.uint8))
        assert series.volume().shape == (2, 4, 5)

    def test_volume_none_without_bscans(self):
        assert Series().volume() is None

    def test_rejects_non_2d_bscan(self):
        with pytest.raises(ValueError):
            Series().add_bscan(np.zeros((2, 3, 4)))
