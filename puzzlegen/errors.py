"""Exceptions raised by the puzzle generators."""


class ConfigurationError(ValueError):
    """Raised when a generator is asked for an impossible board.

    Covers non-positive sizes, explicit distributions of the wrong length
    or sum, and color counts that cannot each receive a tube.
    """
