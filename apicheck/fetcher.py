import asyncio
import time
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict

from . import config
from .decoder import decode_check_response, PayloadDecodeError
from .logger import check_logger
from .models import CheckResponse


class FetchError(Exception):
    """Raised when the status endpoint cannot be reached or does not answer in time."""
    pass


class FetchResult(BaseModel):
    """Raw outcome of a single GET against the status endpoint."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status_code: int = 0
    body: bytes = b""
    elapsed: float = 0.0  # seconds
    error: Optional[Exception] = None


async def _get(
    url: str,
    verify_tls: bool,
    timeout: float,
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport],
):
    headers = {
        "User-Agent": user_agent or config.USER_AGENT,
        # One-shot check; don't let the connection hang open
        "Connection": "close",
    }
    async with httpx.AsyncClient(
        verify=verify_tls,
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(max_keepalive_connections=0),
        headers=headers,
        transport=transport,
    ) as client:
        async with client.stream("GET", url) as response:
            status_code = response.status_code
            # Only a 200 carries a payload worth decoding; error pages are left unread.
            body = await response.aread() if status_code == httpx.codes.OK else b""
            return status_code, body


async def fetch(
    url: str,
    verify_tls: bool = False,
    timeout: Optional[float] = None,
    user_agent: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchResult:
    """
    Issues exactly one GET request to url.

    Args:
        url: The status endpoint to query.
        verify_tls: Whether to validate the server certificate. Off by default.
        timeout: Seconds allowed for the whole request (connect, TLS, headers and body);
            the configured default when unset.
        user_agent: User-Agent header value; the configured default when empty.
        transport: Optional httpx transport, used to route requests to an in-process app.

    Returns:
        A FetchResult. Transport failures are reported on its error field
        as a FetchError, never raised. No retries are attempted.
    """
    if timeout is None:
        timeout = float(config.DEFAULT_TIMEOUT)
    start = time.perf_counter()
    try:
        status_code, body = await asyncio.wait_for(
            _get(url, verify_tls, timeout, user_agent, transport), timeout
        )
    except asyncio.TimeoutError:
        elapsed = time.perf_counter() - start
        error = FetchError(f"GET {url}: request timed out after {timeout:.2f} seconds")
        return FetchResult(elapsed=elapsed, error=error)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        elapsed = time.perf_counter() - start
        error = FetchError(f"GET {url}: {str(e) or e.__class__.__name__}")
        error.__cause__ = e
        return FetchResult(elapsed=elapsed, error=error)

    elapsed = time.perf_counter() - start
    return FetchResult(status_code=status_code, body=body, elapsed=elapsed)


async def fetch_check_response(
    url: str,
    timeout: Optional[float] = None,
    user_agent: str = "",
    verify_tls: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CheckResponse:
    """
    Fetches url and decodes the payload into a CheckResponse carrying the
    run metadata (URL, response time, HTTP code, raw body, error).

    The body is only decoded for a 200 response. Transport and decode
    errors end up on the returned response's error field.
    """
    result = await fetch(url, verify_tls=verify_tls, timeout=timeout, user_agent=user_agent, transport=transport)
    run_fields = {
        "url": url,
        "response_time": result.elapsed,
        "http_code": result.status_code,
        "body": result.body,
    }

    if result.error is not None:
        check_logger.error(str(result.error))
        return CheckResponse(error=result.error, **run_fields)

    if result.status_code != httpx.codes.OK:
        check_logger.info(f"Unexpected HTTP status {result.status_code} from {url}, payload not decoded")
        return CheckResponse(**run_fields)

    try:
        payload = decode_check_response(result.body)
    except PayloadDecodeError as e:
        check_logger.error(str(e))
        return CheckResponse(error=e, **run_fields)

    return payload.model_copy(update=run_fields)
