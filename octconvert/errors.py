"""Exception types raised by octconvert."""


class OctConvertError(Exception):
    """Base class for octconvert errors."""


class OctReadError(OctConvertError):
    """A scan file could not be decoded."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class OctWriteError(OctConvertError):
    """A scan hierarchy could not be encoded to the requested format."""
