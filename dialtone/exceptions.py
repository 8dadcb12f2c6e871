# dialtone/exceptions.py
"""
Exceptions raised by the Dialtone client.

All public exceptions inherit from DialtoneError so callers can catch
the whole family with a single except clause if preferred.

APIError carries everything the server told us about a failed call. The
status-specific subclasses add nothing but their ErrorKind, so callers can
either ``except RateLimitError`` or switch on ``err.kind``. Use
generate_error() (or APIError.generate) to pick the right variant from an
HTTP status and an error payload.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import (
    ERROR_CODE_CONFIGURATION,
    ERROR_CODE_PROVIDER_MODERATION,
    NO_STATUS_OR_BODY_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    UNEXPECTED_ERROR_STATUS,
)


class DialtoneError(Exception):
    """Base exception for all client errors."""


class StreamDecodeError(DialtoneError):
    """
    Raised while iterating a streamed completion when a JSON Lines record
    cannot be parsed. The stream is aborted; no further chunks are produced.

    Attributes
    ----------
    data:
        The raw text that failed to parse.
    """

    def __init__(self, message: str, data: str) -> None:
        self.data = data
        super().__init__(message)


class ErrorKind(str, Enum):
    api_error = "api_error"
    bad_request = "bad_request"
    authentication = "authentication"
    permission_denied = "permission_denied"
    not_found = "not_found"
    method_not_allowed = "method_not_allowed"
    conflict = "conflict"
    precondition_failed = "precondition_failed"
    unprocessable_entity = "unprocessable_entity"
    rate_limit = "rate_limit"
    internal_server = "internal_server"
    bad_gateway = "bad_gateway"
    provider_moderation = "provider_moderation"
    configuration = "configuration"


@dataclass(frozen=True)
class RouterDetails:
    """Routing diagnostics the server attaches under ``detail.router_details``."""

    model: str | None = None
    provider: str | None = None
    provider_response: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RouterDetails | None":
        detail = payload.get("detail") if isinstance(payload, Mapping) else None
        details = detail.get("router_details") if isinstance(detail, Mapping) else None
        if not isinstance(details, Mapping):
            return None
        return cls(
            model=details.get("model"),
            provider=details.get("provider"),
            provider_response=details.get("provider_response"),
        )


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _make_message(status: int | None, error: Any, message: str | None) -> str:
    body_message = error.get("message") if isinstance(error, Mapping) else None
    if body_message:
        msg = body_message if isinstance(body_message, str) else _dumps(body_message)
    elif error is not None:
        msg = _dumps(error)
    else:
        msg = message

    if status is not None and msg:
        return f"{status} {msg}"
    if status is not None:
        return f"{status} status code (no body)"
    if msg:
        return msg
    return NO_STATUS_OR_BODY_MESSAGE


def _payload_field(error: Any, key: str) -> Any:
    return error.get(key) if isinstance(error, Mapping) else None


class APIError(DialtoneError):
    """
    An error response from the Dialtone API, or an unexpected client-side
    failure wrapped as one.

    Attributes (read-only)
    ----------------------
    status:
        HTTP status code, or None when no response was received.
    error:
        The raw error payload as parsed from the response body.
    code / param / type:
        Machine error code, offending parameter and error-type tag, when
        the payload carries them.
    router_details:
        RouterDetails when the server attached routing diagnostics.
    kind:
        ErrorKind discriminant identifying the variant.
    """

    _kind: ErrorKind = ErrorKind.api_error

    def __init__(self, status: int | None, error: Any, message: str | None) -> None:
        super().__init__(_make_message(status, error, message))
        self._status = status
        self._error = error
        self._code = _payload_field(error, "code")
        self._param = _payload_field(error, "param")
        self._type = _payload_field(error, "type")
        self._router_details = RouterDetails.from_payload(error)

    @property
    def message(self) -> str:
        return str(self.args[0])

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def error(self) -> Any:
        return self._error

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def param(self) -> str | None:
        return self._param

    @property
    def type(self) -> str | None:
        return self._type

    @property
    def router_details(self) -> RouterDetails | None:
        return self._router_details

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @classmethod
    def generate(cls, status: int | None, error: Any, message: str | None) -> "APIError":
        return generate_error(status, error, message)

    @classmethod
    def unexpected(cls) -> "APIError":
        """The catch-all error for failures that produced no usable response."""
        return APIError(UNEXPECTED_ERROR_STATUS, None, UNEXPECTED_ERROR_MESSAGE)

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(status={self._status!r}, message={self.message!r})"


class BadRequestError(APIError):
    _kind = ErrorKind.bad_request


class AuthenticationError(APIError):
    _kind = ErrorKind.authentication


class PermissionDeniedError(APIError):
    _kind = ErrorKind.permission_denied


class NotFoundError(APIError):
    _kind = ErrorKind.not_found


class MethodNotAllowedError(APIError):
    _kind = ErrorKind.method_not_allowed


class ConflictError(APIError):
    _kind = ErrorKind.conflict


class PreconditionFailedError(APIError):
    _kind = ErrorKind.precondition_failed


class UnprocessableEntityError(APIError):
    _kind = ErrorKind.unprocessable_entity


class RateLimitError(APIError):
    _kind = ErrorKind.rate_limit


class InternalServerError(APIError):
    _kind = ErrorKind.internal_server


class BadGatewayError(APIError):
    _kind = ErrorKind.bad_gateway


class ProviderModerationError(APIError):
    """The upstream provider refused the request on moderation grounds."""

    _kind = ErrorKind.provider_moderation


class ConfigurationError(APIError):
    """The server rejected the client's routing or provider configuration."""

    _kind = ErrorKind.configuration


# Payload error codes win over the HTTP status.
_ERROR_CODE_MAP: dict[str, type[APIError]] = {
    ERROR_CODE_PROVIDER_MODERATION: ProviderModerationError,
    ERROR_CODE_CONFIGURATION: ConfigurationError,
}

_STATUS_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    409: ConflictError,
    412: PreconditionFailedError,
    422: UnprocessableEntityError,
    429: RateLimitError,
    500: InternalServerError,
    502: BadGatewayError,
}


def generate_error(status: int | None, error: Any, message: str | None) -> APIError:
    """
    Build the APIError variant for an HTTP status and parsed error payload.

    Parameters
    ----------
    status:
        HTTP status code, or None if the failure happened before a response.
    error:
        Parsed JSON error body, or None.
    message:
        Fallback text used when the payload has nothing better to say.
    """
    detail = _payload_field(error, "detail")
    error_code = _payload_field(detail, "error_code")
    if isinstance(error_code, str) and error_code in _ERROR_CODE_MAP:
        return _ERROR_CODE_MAP[error_code](status, error, message)

    error_cls = _STATUS_MAP.get(status) if status is not None else None
    if error_cls is None:
        error_cls = APIError
    return error_cls(status, error, message)
