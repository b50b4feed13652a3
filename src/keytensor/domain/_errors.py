"""
Argument-validation exceptions for keytensor.

The layout and context core has a single failure kind: an argument that can
never be valid (an over-long shape, a non-positive axis size, a request for the
byte width of an unresolved element type, a malformed device string). These
are reported synchronously at the offending call and are never retried.
"""

from typing import Any


class InvalidArgumentError(ValueError):
    """
    Raised when a caller passes a value outside an operation's domain.

    Subclasses `ValueError` so callers that already guard against bad values
    keep working.

    Attributes
    ----------
    argument : str
        Name of the offending parameter (e.g., "shape", "dtype").
    value : Any
        The rejected value.
    """

    def __init__(self, argument: str, value: Any, reason: str) -> None:
        """
        Initialize the InvalidArgumentError.

        Parameters
        ----------
        argument : str
            Name of the offending parameter.
        value : Any
            The rejected value.
        reason : str
            Human-readable explanation of why the value was rejected.
        """
        super().__init__(f"Invalid {argument} {value!r}: {reason}")
        self.argument = argument
        self.value = value
