"""
The networking stack requests are issued through: one httpx.AsyncClient
configured from the session section of the config.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog

from .config import config

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = 'reqwest/0.1'


class Session:
    def __init__(self, settings: Dict[str, Any] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the session from settings (defaults to the session config section)."""
        if settings is None:
            settings = config.session

        self.user_agent = settings.get('user_agent', DEFAULT_USER_AGENT)
        self.timeout = float(settings.get('timeout', 30.0))
        self.follow_redirects = bool(settings.get('follow_redirects', True))
        self.max_redirects = int(settings.get('max_redirects', 5))

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=self.follow_redirects,
            max_redirects=self.max_redirects,
            headers={'User-Agent': self.user_agent},
            limits=httpx.Limits(
                max_connections=int(settings.get('max_connections', 20)),
                max_keepalive_connections=int(settings.get('max_keepalive_connections', 10)),
            ),
            transport=transport,
        )

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def build_request(self, method: str, url, headers=None, content: Optional[bytes] = None) -> httpx.Request:
        """Build a request carrying the session's default headers."""
        return self._client.build_request(method, url, headers=headers, content=content)

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request once and return the fully read response."""
        start_time = time.time()
        try:
            response = await self._client.send(request)
        except httpx.TimeoutException as e:
            logger.warning("request_timeout", method=request.method, url=str(request.url),
                           timeout_seconds=self.timeout, error=str(e))
            raise
        except httpx.HTTPError as e:
            logger.warning("request_failed", method=request.method, url=str(request.url), error=str(e))
            raise

        logger.debug("response_received",
                     method=request.method,
                     url=str(request.url),
                     status_code=response.status_code,
                     size=len(response.content),
                     fetch_time=time.time() - start_time)
        return response

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


_shared: Optional[Session] = None


def shared_session() -> Session:
    """Return the process-wide session, creating it on first use."""
    global _shared
    if _shared is None or _shared.closed:
        _shared = Session()
    return _shared


async def close_shared_session():
    """Close the process-wide session; the next shared_session() call creates a fresh one."""
    global _shared
    if _shared is not None:
        session, _shared = _shared, None
        await session.aclose()
