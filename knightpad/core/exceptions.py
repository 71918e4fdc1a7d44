"""Custom exception hierarchy for sequence counting."""


class KnightPadError(Exception):
    """Base exception for keypad counting failures."""


class InvalidArgumentError(KnightPadError):
    """Raised when the caller supplies an unusable sequence length."""


class MissingLengthError(InvalidArgumentError):
    """Raised when no sequence length was given at all."""


class InvalidLengthError(InvalidArgumentError):
    """Raised when the sequence length is not an integer."""


class LayoutError(KnightPadError):
    """Raised when a keypad layout has duplicate labels or coordinates."""


class UnknownKeyError(KnightPadError, KeyError):
    """Raised when a key label or index is not part of the keypad."""


class CountOverflowError(KnightPadError, OverflowError):
    """Raised when a count exceeds the unsigned 64-bit range and the guard is on."""


class CountCancelledError(KnightPadError):
    """Raised when a running count observes its cancellation event."""


class SolverError(KnightPadError):
    """Raised when the CP-SAT cross-check cannot finish its enumeration."""
