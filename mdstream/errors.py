"""Exception types raised by mdstream commands."""


class MdstreamError(Exception):
    """Base class for errors raised by mdstream."""


class ConfigurationError(MdstreamError):
    """
    Bad or contradictory command configuration.

    Raised before any frame is processed whenever possible, e.g. for a
    selection with too many atoms, mismatched format lists or unit cells
    that can not be merged without an explicit cell.
    """
