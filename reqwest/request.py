"""
Fluent request builder: chain path/method/header/body, then fetch.
"""
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

import httpx
import structlog

from .errors import BadServerResponse
from .publisher import Publisher
from .session import Session, shared_session

logger = structlog.get_logger(__name__)

# sub-delims plus ':' and '@' may appear unescaped in a path segment
SEGMENT_SAFE = "!$&'()*+,;=:@"


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


class Header(NamedTuple):
    name: str
    value: str


class Request:
    """A request under construction.

    Every builder call updates one field and returns the same object.
    fetch() snapshots the fields, so the request can keep being changed
    without affecting publishers already returned.
    """

    def __init__(self, url: Union[str, httpx.URL]):
        self._url = httpx.URL(url)
        self._method = Method.GET
        self._headers: List[Header] = []
        self._body: Optional[bytes] = None

    @property
    def url(self) -> httpx.URL:
        return self._url

    @property
    def http_method(self) -> Method:
        return self._method

    @property
    def headers(self) -> Tuple[Header, ...]:
        return tuple(self._headers)

    @property
    def content(self) -> Optional[bytes]:
        return self._body

    def path(self, path: str) -> "Request":
        """Append the non-empty '/'-separated segments of path to the URL."""
        segments = [_encode_segment(segment) for segment in path.split('/') if segment]
        if not segments:
            return self

        parts = urlsplit(str(self._url))
        new_path = parts.path.rstrip('/') + '/' + '/'.join(segments)
        self._url = httpx.URL(urlunsplit(parts._replace(path=new_path)))
        return self

    def method(self, method: Union[Method, str]) -> "Request":
        if not isinstance(method, Method):
            method = Method(method.upper())
        self._method = method
        return self

    def header(self, name: str, value: str) -> "Request":
        self._headers.append(Header(name, value))
        return self

    def body(self, body: Union[bytes, str]) -> "Request":
        if isinstance(body, str):
            body = body.encode('utf-8')
        self._body = bytes(body)
        return self

    def build(self) -> httpx.Request:
        """Return the request as httpx would send it, without session defaults."""
        return httpx.Request(
            self._method.value,
            self._url,
            headers=[tuple(header) for header in self._headers],
            content=self._body,
        )

    def fetch(self, session: Optional[Session] = None) -> Publisher[bytes]:
        """Issue the request once per await and yield the raw body of a 2xx response.

        Any other status raises BadServerResponse; network failures raise the
        httpx exception. session defaults to the shared session.
        """
        method = self._method.value
        url = self._url
        headers = [tuple(header) for header in self._headers]
        body = self._body

        async def run() -> bytes:
            active = session or shared_session()
            request = active.build_request(method, url, headers=headers, content=body)
            response = await active.send(request)

            if not 200 <= response.status_code < 300:
                logger.warning("bad_server_response",
                               method=method,
                               url=str(url),
                               status_code=response.status_code)
                raise BadServerResponse(response)

            return response.content

        return Publisher(run)

    def __repr__(self):
        return f"<Request {self._method.value} {self._url}>"


def request(url: Union[str, httpx.URL]) -> Request:
    """Start building a request for url."""
    return Request(url)


def _encode_segment(segment: str) -> str:
    # '.' and '..' would be removed by URL normalization
    if segment in ('.', '..'):
        return '%2E' * len(segment)
    return quote(segment, safe=SEGMENT_SAFE)
