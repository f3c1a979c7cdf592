"""Tests for octconvert.utils — DICOM date and identifier parsing."""

import pytest

from octconvert.octdata import Date
from octconvert.utils import normalize_windows_path, parse_dicom_date, parse_int_id


# ---------------------------------------------------------------------------
# parse_dicom_date
# ---------------------------------------------------------------------------

class TestParseDicomDate:
    def test_da_value(self):
        assert parse_dicom_date("19900615") == Date(1990, 6, 15)

    def test_legacy_dotted_value(self):
        assert parse_dicom_date("1990.06.15") == Date(1990, 6, 15)

    def test_whitespace_stripped(self):
        assert parse_dicom_date(" 20240102 ") == Date(2024, 1, 2)

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_is_empty(self, value):
        assert parse_dicom_date(value).is_empty

    def test_garbage_is_empty(self):
        assert parse_dicom_date("June 1990").is_empty

    def test_impossible_date_is_empty(self):
        assert parse_dicom_date("19901332").is_empty


# ---------------------------------------------------------------------------
# parse_int_id
# ---------------------------------------------------------------------------

class TestParseIntId:
    def test_numeric_string(self):
        assert parse_int_id("3") == 3

    def test_integer_value(self):
        assert parse_int_id(7) == 7

    def test_padded_value(self):
        assert parse_int_id(" 0012 ") == 12

    def test_missing_uses_default(self):
        assert parse_int_id(None) == 1
        assert parse_int_id("", default=5) == 5

    def test_non_numeric_uses_default(self):
        assert parse_int_id("STUDY1") == 1
        assert parse_int_id("-4") == 1


class TestNormalizeWindowsPath:
    def test_short_path_unchanged(self, tmp_path):
        assert normalize_windows_path(tmp_path / "a.dcm") == str(tmp_path / "a.dcm")
