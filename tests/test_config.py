"""Tests for octconvert.config — output suffixes and run options."""

import dataclasses
from pathlib import Path

import pytest

from octconvert.config import (
    ConversionOptions,
    FileReadOptions,
    FileWriteOptions,
    OutputFormat,
    suffix_for,
)


class TestSuffixFor:
    @pytest.mark.parametrize(
        "fmt, suffix",
        [
            (OutputFormat.XOCT, ".xoct"),
            (OutputFormat.OCTBIN, ".octbin"),
            (OutputFormat.IMG, ".img"),
        ],
    )
    def test_known_formats(self, fmt, suffix):
        assert suffix_for(fmt) == suffix

    def test_invalid_variant_gives_empty_suffix(self):
        assert suffix_for("bmp") == ""
        assert suffix_for(None) == ""


class TestConversionOptions:
    def test_defaults(self):
        opt = ConversionOptions()
        assert opt.output_format is OutputFormat.XOCT
        assert opt.add_old_filename is False
        assert opt.anonymise is False
        assert opt.output_path is None
        assert opt.suffix == ".xoct"
        assert opt.read_options == FileReadOptions()
        assert opt.write_options == FileWriteOptions()

    def test_is_immutable(self):
        opt = ConversionOptions(output_path=Path("/tmp/out"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            opt.anonymise = True

    def test_read_option_defaults(self):
        read = FileReadOptions()
        assert read.fill_empty_pixel_white is False
        assert read.register_bscans is True
        assert Path(read.lib_path).name == "octconvert"

    def test_write_option_defaults(self):
        assert FileWriteOptions().octbin_flat is True
