"""Client for the upstream authentication/chat backend.

Every call runs under the same protocol: a fresh cookie jar seeded with the
language cookie and the bridged upstream session cookie, a ``GET /csrf`` to
obtain a current anti-forgery token, then the action request carrying that
token in the ``X-XSRF-TOKEN`` header. Nothing is retried.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from chatfront.config import get_config

logger = logging.getLogger(__name__)

CSRF_PATH = "/csrf"
CSRF_HEADER_NAME = "X-XSRF-TOKEN"
LANG_COOKIE_NAME = "lang"

# Set-Cookie attributes; anything else in a bridged value is a name=value pair
COOKIE_ATTRIBUTES = frozenset({
    "path",
    "domain",
    "expires",
    "max-age",
    "secure",
    "httponly",
    "samesite",
    "priority",
    "partitioned",
})


@dataclass(frozen=True)
class PlainBody:
    """Upstream error body that is a plain string, shown to users verbatim."""
    text: str


@dataclass(frozen=True)
class StructuredBody:
    """Upstream error body that is JSON but not a string."""
    data: Any


ErrorBody = Union[PlainBody, StructuredBody, None]


class UpstreamError(Exception):
    """Raised when an upstream call does not succeed.

    Attributes:
        status: HTTP status of the failed response, None if there was no response
        body: Tagged error body
    """

    def __init__(
        self,
        status: Optional[int] = None,
        body: ErrorBody = None,
        message: Optional[str] = None,
    ):
        self.status = status
        self.body = body
        super().__init__(message or f"Upstream call failed with status {status}")

    def user_message(self, fallback: str) -> str:
        """Message to show the user: the upstream's plain text, else ``fallback``."""
        if isinstance(self.body, PlainBody):
            return self.body.text
        return fallback


class UpstreamUnauthorized(UpstreamError):
    """No bridged session cookie, or the upstream answered 401."""
    pass


class UpstreamRejected(UpstreamError):
    """The upstream answered with a non-2xx status other than 401."""
    pass


class UpstreamUnreachable(UpstreamError):
    """The request never produced a response."""
    pass


@dataclass(frozen=True)
class UpstreamCredentials:
    """What a single call needs from the local session.

    Attributes:
        lang: Language cookie value to seed ("en" or "cy")
        session_cookie: Bridged upstream Set-Cookie value, if signed in
    """
    lang: str = "en"
    session_cookie: Optional[str] = None


@dataclass
class UpstreamResponse:
    """Successful upstream call.

    Attributes:
        status_code: HTTP status of the action response
        data: Parsed body (JSON when the response is JSON, else text)
        csrf_token: Token fetched from /csrf for this call
        set_cookie: Set-Cookie values of the action response joined with "; "
    """
    status_code: int
    data: Any
    csrf_token: str
    set_cookie: Optional[str] = None


def parse_bridged_cookie(value: Optional[str]) -> Dict[str, str]:
    """Extract cookie name/value pairs from a bridged Set-Cookie string.

    The bridged value may be several Set-Cookie headers joined with "; ",
    so every pair that is not a cookie attribute is kept.

    Args:
        value: Stored Set-Cookie string

    Returns:
        Mapping of cookie names to values
    """
    cookies: Dict[str, str] = {}
    if not value:
        return cookies

    for part in value.split(";"):
        name, sep, cookie_value = part.strip().partition("=")
        name = name.strip()
        if not sep or not name or name.lower() in COOKIE_ATTRIBUTES:
            continue
        cookies[name] = cookie_value.strip()
    return cookies


def response_data(response: httpx.Response) -> Any:
    """Parse a response body as JSON when declared so, else return its text."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def classify_body(data: Any) -> ErrorBody:
    if data is None or data == "":
        return None
    if isinstance(data, str):
        return PlainBody(data)
    return StructuredBody(data)


def error_from_response(response: httpx.Response) -> UpstreamError:
    """Build the UpstreamError subclass matching a failed response."""
    body = classify_body(response_data(response))
    path = response.request.url.path if response.request else "?"
    message = f"Upstream {path} answered {response.status_code}"
    if response.status_code == 401:
        return UpstreamUnauthorized(response.status_code, body, message)
    return UpstreamRejected(response.status_code, body, message)


class UpstreamClient:
    """Performs upstream calls under the CSRF + cookie protocol.

    Each call opens its own ``httpx.AsyncClient`` bound to a fresh cookie jar,
    so no cookie state is shared between requests.

    Attributes:
        base_url: Upstream base URL
        timeout: Per-request timeout in seconds (None waits indefinitely)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize UpstreamClient.

        Args:
            base_url: Upstream base URL (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
            transport: Optional httpx transport, used by tests to stub the upstream
        """
        config = get_config()
        self.base_url = (base_url or config.upstream_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.upstream_timeout
        self._transport = transport

    def _build_jar(self, credentials: UpstreamCredentials) -> httpx.Cookies:
        jar = httpx.Cookies()
        jar.set(LANG_COOKIE_NAME, credentials.lang)
        for name, value in parse_bridged_cookie(credentials.session_cookie).items():
            jar.set(name, value)
        return jar

    def _open(self, credentials: UpstreamCredentials) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            cookies=self._build_jar(credentials),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _fetch_csrf_token(self, client: httpx.AsyncClient) -> str:
        response = await client.get(CSRF_PATH)
        if not response.is_success:
            raise error_from_response(response)

        data = response_data(response)
        token = data.get("csrfToken") if isinstance(data, dict) else None
        if not token:
            raise UpstreamRejected(
                response.status_code,
                classify_body(data),
                "Upstream /csrf response did not contain a csrfToken",
            )
        return token

    async def call(
        self,
        credentials: UpstreamCredentials,
        method: str,
        path: str,
        body: Optional[dict] = None,
        requires_session: bool = False,
    ) -> UpstreamResponse:
        """Fetch a CSRF token, then issue one action request.

        Args:
            credentials: Language and bridged session cookie for this call
            method: HTTP method of the action request
            path: Upstream path of the action request
            body: JSON body of the action request
            requires_session: Fail before any request when no session cookie is bridged

        Returns:
            UpstreamResponse for a 2xx action response

        Raises:
            UpstreamUnauthorized: Missing session cookie or upstream 401
            UpstreamRejected: Any other non-2xx response
            UpstreamUnreachable: Transport failure
        """
        if requires_session and not credentials.session_cookie:
            logger.warning(f"No upstream session for {method} {path}; call not attempted")
            raise UpstreamUnauthorized(message="No upstream session cookie in local session")

        async with self._open(credentials) as client:
            try:
                csrf_token = await self._fetch_csrf_token(client)
                response = await client.request(
                    method,
                    path,
                    json=body,
                    headers={CSRF_HEADER_NAME: csrf_token},
                )
            except httpx.RequestError as e:
                logger.error(f"Upstream {method} {path} unreachable: {e}")
                raise UpstreamUnreachable(message=f"Could not reach upstream: {e}") from e

        logger.info(f"Upstream {method} {path} -> {response.status_code}")
        if not response.is_success:
            raise error_from_response(response)

        set_cookie_headers = response.headers.get_list("set-cookie")
        return UpstreamResponse(
            status_code=response.status_code,
            data=response_data(response),
            csrf_token=csrf_token,
            set_cookie="; ".join(set_cookie_headers) if set_cookie_headers else None,
        )

    async def read_many(
        self, credentials: UpstreamCredentials, paths: Sequence[str]
    ) -> List[Any]:
        """Issue concurrent CSRF-free GETs and return their parsed bodies.

        All-or-nothing: the first failed read raises and no data is returned.
        A transport failure cancels the remaining reads before the client closes.

        Args:
            credentials: Language and bridged session cookie
            paths: Upstream paths to read

        Returns:
            Parsed bodies in the order of ``paths``
        """
        if not credentials.session_cookie:
            raise UpstreamUnauthorized(message="No upstream session cookie in local session")

        async with self._open(credentials) as client:
            try:
                async with asyncio.TaskGroup() as group:
                    tasks = [group.create_task(client.get(path)) for path in paths]
            except ExceptionGroup as eg:
                transport_errors = eg.subgroup(httpx.RequestError)
                if transport_errors is None:
                    raise
                e = transport_errors.exceptions[0]
                logger.error(f"Upstream read unreachable: {e}")
                raise UpstreamUnreachable(message=f"Could not reach upstream: {e}") from e

        responses = [task.result() for task in tasks]
        for response in responses:
            if not response.is_success:
                raise error_from_response(response)
        return [response_data(response) for response in responses]


_default_client: Optional[UpstreamClient] = None


def get_upstream_client() -> UpstreamClient:
    """Shared UpstreamClient built from configuration (FastAPI dependency)."""
    global _default_client
    if _default_client is None:
        _default_client = UpstreamClient()
    return _default_client
