from typing import Any


class HarnessError(Exception):
    """Base class for every error raised by the harness."""


class APIError(HarnessError):
    """
    Base class for errors talking to the matching service.

    Attributes
    ----------
    message : str
        Human-readable explanation.
    status  : int | None
        HTTP status code, if available.
    url     : str | None
        Requested URL, useful for logs.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        parts: list[str] = [self.message]
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.url:
            parts.append(f"url={self.url}")
        return " | ".join(parts)


class InfrastructureFailure(APIError):
    """The harness could not reach or authenticate against the service.

    Unrelated to the input under test, so it must never be read as a
    contract bug.
    """


class ContractViolation(HarnessError, AssertionError):
    """A response diverged from what the scenario expects."""

    def __init__(
        self, message: str, *, expected: Any = None, actual: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return self.message
