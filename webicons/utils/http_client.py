"""A helper to create asynchronous HTTP client (via `httpx.AsyncClient`)
with common configurations.
"""

from http.cookiejar import CookieJar, DefaultCookiePolicy

from httpx import AsyncBaseTransport, AsyncClient, Limits, Timeout


def create_anonymous_cookie_jar() -> CookieJar:
    """Create a cookie jar that refuses every cookie, so none is ever sent back."""
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


def create_http_client(
    max_connections: int = 64,
    connect_timeout: float = 5.0,
    request_timeout: float = 10.0,
    pool_timeout: float = 1.0,
    headers: dict[str, str] | None = None,
    cookies: CookieJar | None = None,
    transport: AsyncBaseTransport | None = None,
) -> AsyncClient:
    """Create a new `httpx.AsyncClient`.

    Args:
      - `max_connections` {int}: Max connections of the connection pool.
      - `connect_timeout` {float}: The timeout for establishing a connection to the host.
      - `request_timeout` {float}: The timeout for handling a request to the host.
      - `pool_timeout` {float}: The timeout for acquiring a connection from the pool.
      - `headers` {dict[str, str] | None}: Headers sent with every request.
      - `cookies` {CookieJar | None}: The cookie jar of the client, e.g. an anonymous one.
      - `transport` {AsyncBaseTransport | None}: A custom transport, e.g. `httpx.MockTransport`.
    Returns:
      - {AsyncClient}: An async HTTP client.
    """
    return AsyncClient(
        limits=Limits(max_connections=max_connections),
        timeout=Timeout(
            request_timeout, connect=min(connect_timeout, request_timeout), pool=pool_timeout
        ),
        headers=headers,
        cookies=cookies,
        follow_redirects=True,
        transport=transport,
    )
