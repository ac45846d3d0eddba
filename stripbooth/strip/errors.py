"""Exceptions raised by the strip compositing pipeline."""


class StripError(Exception):
    """Base class for compositing failures."""


class DecodeFailure(StripError):
    """A photo or frame asset could not be decoded into pixels."""


class FrameAssetMissing(StripError):
    """No bytes are available for a requested frame."""


class UnsupportedPhotoCount(StripError, ValueError):
    """The frame pipeline only handles 2, 3 or 4 photos."""
