"""
Error types: decoding failures and the transport error for non-2xx responses.
"""
from enum import Enum

import httpx


class ResponseErrorKind(Enum):
    PARSE = "parse"
    BAD_RESPONSE = "bad_response"


class ResponseError(Exception):
    """Raised when a response payload cannot be decoded.

    Only the kind is kept; the upstream exception, if any, is chained as
    ``__cause__``.
    """

    PARSE = ResponseErrorKind.PARSE
    BAD_RESPONSE = ResponseErrorKind.BAD_RESPONSE

    def __init__(self, kind: ResponseErrorKind):
        super().__init__(kind.value)
        self.kind = kind

    @classmethod
    def parse(cls) -> "ResponseError":
        return cls(ResponseErrorKind.PARSE)

    @classmethod
    def bad_response(cls) -> "ResponseError":
        return cls(ResponseErrorKind.BAD_RESPONSE)

    def __eq__(self, other):
        if isinstance(other, ResponseError):
            return self.kind is other.kind
        if isinstance(other, ResponseErrorKind):
            return self.kind is other
        return NotImplemented

    def __hash__(self):
        return hash(self.kind)

    def __repr__(self):
        return f"ResponseError({self.kind.name})"


class BadServerResponse(httpx.HTTPStatusError):
    """Raised when the server answers with a status outside [200, 300)."""

    def __init__(self, response: httpx.Response):
        super().__init__(
            f"Bad server response: HTTP {response.status_code} for {response.request.url}",
            request=response.request,
            response=response,
        )

    @property
    def status_code(self) -> int:
        return self.response.status_code
