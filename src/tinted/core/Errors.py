# tinted/core/Errors.py
"""Exception types raised by the highlighting pipeline."""


class TintedError(Exception):
    """Base class for all tinted errors."""


class TokenizerError(TintedError):
    """A line could not be tokenized. Callers fall back to plain text."""


class RenderRangeError(TintedError, ValueError):
    """The requested line range is empty or reversed."""

    def __init__(self, start: int, stop: int) -> None:
        super().__init__(f"Invalid render range [{start}, {stop}): start must be below stop")
        self.start = start
        self.stop = stop
