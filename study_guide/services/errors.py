"""
Error kinds raised by the guide pipelines.

Every fatal condition surfaces as one StudyGuideError subclass carrying a
single human-readable message; the API layer maps `status_code` onto the
HTTP response.
"""
from __future__ import annotations


class StudyGuideError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(StudyGuideError):
    """A required credential is not configured. Raised before any network call."""
    status_code = 503
    kind = "configuration"


class UpstreamAPIError(StudyGuideError):
    """Non-success response or transport failure that is not retryable."""
    status_code = 502
    kind = "upstream"


class EndpointUnavailableError(UpstreamAPIError):
    """The named model rejected the request as unknown or unsupported."""
    kind = "endpoint_unavailable"


class MalformedEnvelopeError(StudyGuideError):
    status_code = 502
    kind = "malformed_envelope"


class ResponseFormatError(StudyGuideError):
    """The model answered, but not with parseable JSON."""
    status_code = 502
    kind = "format"


class GuideValidationError(StudyGuideError):
    status_code = 502
    kind = "validation"


class EndpointsExhaustedError(StudyGuideError):
    status_code = 502
    kind = "endpoints_exhausted"


class UnsupportedInputError(StudyGuideError):
    status_code = 415
    kind = "unsupported_input"


class InfographicError(StudyGuideError):
    status_code = 502
    kind = "infographic"
