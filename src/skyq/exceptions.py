# skyq/exceptions.py
from __future__ import annotations


class SkyqException(Exception):
    """Base exception for the skyq package."""


class SkyqRequestException(SkyqException):
    """A request to the box could not be built or sent."""


class SkyqConnectionException(SkyqRequestException):
    """The request was sent but no response arrived (refused, unreachable, timeout)."""


class SkyqResponseException(SkyqRequestException):
    """The box answered with a status other than 200."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SkyqInvalidDataException(SkyqException):
    """The box answered 200 but the body did not have the expected shape."""


class SkyqConfigException(SkyqException):
    """Adapter configuration is missing or invalid."""
