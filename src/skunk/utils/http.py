"""HTTP client factory shared by every remote call."""

import httpx

from skunk import __version__

USER_AGENT = f"skunk-cli/{__version__}"


def create_client(
    timeout: float | None = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an AsyncClient with skunk's default headers.

    Redirects are never followed automatically; callers that accept a
    redirect handle it themselves.

    Args:
        timeout: Request timeout in seconds (None disables it)
        transport: Optional transport override (tests use httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient, to be used as an async context manager
    """
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
        transport=transport,
        follow_redirects=False,
    )
