"""
HTTP transport for the Buzzex REST API.

Wraps an aiohttp session: attaches the client headers, enforces the
per-call timeout, decodes JSON and checks the exchange's ``error`` array.
"""

import asyncio
import json
from typing import Any, Dict, List, Mapping, Optional

import aiohttp

from buzzex.core.config import DEFAULT_USER_AGENT
from buzzex.core.exceptions import (
    MalformedResponseError,
    RemoteError,
    TransportError,
    UnknownRemoteError,
    wrap_exception,
)
from buzzex.core.logger import get_logger
from buzzex.transport.encoding import encode_params

logger = get_logger(__name__)

HARD_ERROR_MARKER = "E"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def extract_error_codes(errors: List[Any]) -> List[str]:
    """Return hard-marked entries with the marker stripped, in order."""
    return [
        entry[len(HARD_ERROR_MARKER):]
        for entry in errors
        if isinstance(entry, str) and entry.startswith(HARD_ERROR_MARKER)
    ]


def validate_response(response: Any) -> Any:
    """
    Check the ``error`` array of a decoded response.

    Args:
        response: Decoded JSON body

    Returns:
        The response, unchanged, when it carries no errors

    Raises:
        RemoteError: At least one entry carries the hard-error marker
        UnknownRemoteError: Errors present but none carries the marker
    """
    if not isinstance(response, dict):
        return response

    errors = response.get("error")
    if not errors:
        return response
    if isinstance(errors, str):
        errors = [errors]
    elif not isinstance(errors, list):
        logger.warning(f"Buzzex API returned an unreadable error field: {errors!r}")
        raise UnknownRemoteError([errors])

    codes = extract_error_codes(errors)
    if not codes:
        logger.warning(f"Buzzex API returned unmarked errors: {errors}")
        raise UnknownRemoteError(errors)

    logger.warning(f"Buzzex API returned errors: {', '.join(codes)}")
    raise RemoteError(codes)


def decode_json(body: str, url: str) -> Any:
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"{url} returned a non-JSON body")
        raise MalformedResponseError(
            "Response body is not valid JSON",
            details={"url": url, "body": body[:200] if body else body},
            original_exception=e
        )


class HTTPTransport:
    """
    Thin async HTTP client.

    The aiohttp session is created lazily on first use and reused by every
    call; close() releases it. A session passed in by the caller is never
    closed here.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.user_agent = user_agent
        self.session = session
        self._owns_session = session is None

    async def _ensure_session(self):
        """Make sure an open HTTP session exists"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._owns_session = True

    async def close(self):
        """Close the HTTP session if this transport created it"""
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

    def _headers(self, headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
        merged = dict(headers or {})
        merged["User-Agent"] = self.user_agent
        return merged

    async def _request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        timeout_ms: int,
        data: Optional[str] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> str:
        await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000.0)

        try:
            async with self.session.request(
                method,
                url,
                headers=headers,
                data=data,
                json=json_body,
                timeout=timeout,
            ) as response:
                status = response.status
                body = await response.text()

        except asyncio.TimeoutError as e:
            logger.error(f"{method} {url} timed out after {timeout_ms}ms")
            raise TransportError(
                f"Request timed out after {timeout_ms}ms",
                details={"url": url, "method": method},
                original_exception=e
            )

        except aiohttp.ClientError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise wrap_exception(
                e,
                TransportError,
                f"Request failed: {e}",
                url=url,
                method=method
            )

        if status >= 400:
            logger.error(f"{method} {url} returned HTTP {status}")
            raise TransportError(
                f"HTTP {status}",
                details={"url": url, "method": method, "status": status, "body": body[:200]}
            )

        return body

    async def send(
        self,
        url: str,
        headers: Optional[Mapping[str, str]],
        params: Mapping[str, Any],
        timeout_ms: int,
        method: str = "GET",
    ) -> Any:
        """
        Send an API request and return the decoded, validated response.

        POST requests carry the encoded params both in the body and in the
        query string of the URL. GET requests carry no body.

        Args:
            url: Full request URL
            headers: Extra headers (User-Agent is always set)
            params: Request parameters
            timeout_ms: Round-trip timeout in milliseconds
            method: HTTP method

        Returns:
            Decoded JSON response

        Raises:
            TransportError: Network failure, timeout or HTTP error status
            MalformedResponseError: Body is not JSON
            RemoteError: Exchange reported errors
        """
        method = method.upper()
        request_headers = self._headers(headers)
        data = None

        if method == "POST":
            data = encode_params(params)
            request_headers.setdefault("Content-Type", FORM_CONTENT_TYPE)
            if data:
                url = f"{url}?{data}"

        logger.debug(f"{method} {url}")
        body = await self._request(method, url, request_headers, timeout_ms, data=data)
        return validate_response(decode_json(body, url))

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        timeout_ms: int,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """
        POST a JSON body and return the decoded response without checking
        its ``error`` field.

        Raises:
            TransportError: Network failure, timeout or HTTP error status
            MalformedResponseError: Body is not JSON
        """
        logger.debug(f"POST {url} (json)")
        body = await self._request("POST", url, self._headers(headers), timeout_ms, json_body=payload)
        return decode_json(body, url)
