class ChessSiegeError(Exception):
    """Base exception for engine errors."""

    pass


class InvalidCoordinateError(ChessSiegeError, ValueError):
    """Raised when algebraic square text cannot be parsed."""

    pass


class BoardInvariantError(ChessSiegeError, AssertionError):
    """Raised when the board would hold two pieces on one square or one identity twice.

    This indicates an engine defect, never a player mistake.
    """

    pass
