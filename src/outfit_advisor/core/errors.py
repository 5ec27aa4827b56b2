"""Failure taxonomy for the analysis flow."""

from enum import Enum


class FailureKind(str, Enum):
    """Why a fallback result was produced."""

    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    SERVICE = "service"
    PARSE = "parse"
    IMAGE = "image"
    UNEXPECTED = "unexpected"


class OutfitAdvisorError(Exception):
    """Base class for errors raised inside the analysis flow."""

    kind: FailureKind = FailureKind.UNEXPECTED


class ConfigurationError(OutfitAdvisorError):
    """No service credential is configured."""

    kind = FailureKind.CONFIGURATION


class RequestTimeoutError(OutfitAdvisorError):
    """The model call did not finish before the deadline."""

    kind = FailureKind.TIMEOUT

    def __init__(self, timeout: float):
        super().__init__(f"Request exceeded {timeout:g}s timeout")
        self.timeout = timeout


class ServiceError(OutfitAdvisorError):
    """Transport failure or an error returned by the model service."""

    kind = FailureKind.SERVICE


class ParseError(OutfitAdvisorError):
    """The model reply was not valid JSON or lacked expected keys."""

    kind = FailureKind.PARSE

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


class ImageEncodingError(OutfitAdvisorError, OSError):
    """The image could not be read or downloaded."""

    kind = FailureKind.IMAGE
