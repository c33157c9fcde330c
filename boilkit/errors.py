"""An error type marking failures raised by this package."""

from __future__ import annotations


class BoilError(Exception):
    """Wraps another exception; its message is the wrapped one's."""

    def __init__(self, err: BaseException) -> None:
        super().__init__(str(err))
        self.err = err
        self.__cause__ = err

    def __str__(self) -> str:
        return str(self.err)


def wrap_err(err: BaseException) -> BoilError:
    """Wrap ``err`` in a BoilError."""
    return BoilError(err)


def is_boil_err(err: BaseException) -> bool:
    """Return True if ``err`` is a BoilError."""
    return isinstance(err, BoilError)