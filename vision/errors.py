"""Failure kinds raised while extracting a focus region."""


class FocusExtractionError(Exception):
    """Base class; the extractor turns any of these into a missing result."""


class UnsupportedPixelFormat(FocusExtractionError):
    pass


class NoMarkerDetected(FocusExtractionError):
    pass


class DegenerateHull(FocusExtractionError):
    pass


class CompositingFailure(FocusExtractionError):
    pass
