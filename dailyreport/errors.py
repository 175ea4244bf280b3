"""Exceptions raised while building a report document."""


class ReportError(Exception):
    """Base class for every report generation failure."""


class ReportPreconditionError(ReportError):
    """Required input is missing or malformed; raised before any drawing."""


class RasterizationError(ReportError):
    """Text or chart could not be rendered to a bitmap."""


class LayoutOverflowError(ReportError):
    """A section tried to draw past the bottom margin of the page."""


class SerializationError(ReportError):
    """The finished page could not be written out as PDF bytes."""
