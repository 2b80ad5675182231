"""Error types raised by the contact graph core."""


class ContactGraphError(Exception):
    """Base class for all errors raised by contactgraph."""


class InvalidContactTypeError(ContactGraphError, ValueError):
    """Unknown or malformed contact type string (e.g. ``"Ca/"``)."""


class InvalidCutoffError(ContactGraphError, ValueError):
    """Distance cutoff that cannot define a grid (zero or negative)."""


class InconsistentInputError(ContactGraphError, ValueError):
    """Inputs that do not agree with each other."""


class InconsistentAlignmentError(InconsistentInputError):
    """Alignment missing a tag or disagreeing with a graph sequence."""


class GraphMetadataMismatchError(InconsistentInputError):
    """Graphs with different cutoff, contact type or sequence combined together."""


class GraphFileFormatError(ContactGraphError):
    """Malformed graph file."""
