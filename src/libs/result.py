"""
Result type shared by every use case.

Use cases never raise for expected outcomes; they return
``Return.ok(value)`` or ``Return.err(Error(code, message))`` and the API
layer maps the error code to an HTTP status.
"""

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Error:
    """Expected, user-facing failure"""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __repr__(self) -> str:
        return f"Error(code={self.code!r}, message={self.message!r})"


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None


class Return:
    @staticmethod
    def ok(value: Optional[T] = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
