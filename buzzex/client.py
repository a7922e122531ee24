"""
Buzzex API client.

Entry point of the library: routes method names to the public or private
flow. Private calls run in two phases, a credential grant for a fresh
bearer token followed by the request itself.

Usage:
    async with BuzzexClient(key, secret) as client:
        ticker = await client.api("ticker", {"param": "btc_usdt"})
        orders = await client.api("active-orders")
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from buzzex.auth.signer import NonceGenerator, sign
from buzzex.auth.token_provider import TokenProvider
from buzzex.core.config import ClientConfig, Settings, get_settings
from buzzex.core.exceptions import ConfigurationError, wrap_exception
from buzzex.core.logger import get_logger
from buzzex.methods import MethodKind, classify_method, http_method_for
from buzzex.services.decorators import Callback, log_api_call, with_callback
from buzzex.transport.http import HTTPTransport

logger = get_logger(__name__)

RequestParams = Dict[str, Any]
Options = Union[None, str, ClientConfig, Mapping[str, Any]]

# Legacy camelCase option names
_OPTION_ALIASES = {
    "url": "base_url",
    "baseUrl": "base_url",
    "version": "api_version",
    "apiVersion": "api_version",
    "timeout": "timeout_ms",
    "timeoutMs": "timeout_ms",
    "attachSignature": "attach_signature",
    "userAgent": "user_agent",
}


def _normalize_options(options: Options) -> Dict[str, Any]:
    if options is None:
        return {}
    # A bare string is the one-time password
    if isinstance(options, str):
        return {"otp": options}
    if isinstance(options, ClientConfig):
        return options.model_dump(exclude={"api_key", "api_secret"})
    if not isinstance(options, Mapping):
        raise ConfigurationError(
            "options must be a mapping, a ClientConfig or an OTP string",
            details={"type": type(options).__name__}
        )
    return {_OPTION_ALIASES.get(key, key): value for key, value in options.items()}


def _split_callback(params, callback) -> Tuple[Optional[RequestParams], Optional[Callback]]:
    # api(method, callback) shorthand
    if callable(params) and callback is None:
        return None, params
    return params, callback


@dataclass
class PrivateRequest:
    """A private call after nonce/otp injection and signing"""

    method: str
    path: str
    url: str
    http_method: str
    params: RequestParams
    signature: str


class BuzzexClient:
    """
    Buzzex REST API client.

    Args:
        api_key: API key
        api_secret: Base64-encoded API secret
        options: ClientConfig fields as a mapping (camelCase names such as
            ``timeoutMs`` or ``baseUrl`` are accepted), a ClientConfig, or a
            bare string taken as the one-time password
        transport: HTTPTransport to use instead of a private one
    """

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        options: Options = None,
        transport: Optional[HTTPTransport] = None,
    ):
        try:
            self.config = ClientConfig(
                api_key=api_key,
                api_secret=api_secret,
                **_normalize_options(options)
            )
        except ValidationError as e:
            raise wrap_exception(e, ConfigurationError, "Invalid client configuration")

        self._owns_transport = transport is None
        self.transport = transport or HTTPTransport(user_agent=self.config.user_agent)
        self.token_provider = TokenProvider(
            self.transport,
            self.config.base_url,
            self.config.timeout_ms,
        )
        self._nonces = NonceGenerator()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[HTTPTransport] = None,
    ) -> "BuzzexClient":
        """Build a client from BUZZEX_* environment settings"""
        settings = settings or get_settings()
        config = settings.get_client_config()
        return cls(config.api_key, config.api_secret, config, transport=transport)

    async def close(self):
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> "BuzzexClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ==================== paths ====================

    def _api_prefix(self) -> str:
        return f"/api/v{self.config.api_version}"

    def public_path(self, method: str) -> str:
        return f"{self._api_prefix()}/{method}"

    def private_path(self, method: str) -> str:
        return f"{self._api_prefix()}/trading/{method}"

    # ==================== routing ====================

    def api(
        self,
        method: str,
        params: Optional[RequestParams] = None,
        callback: Optional[Callback] = None,
    ) -> Awaitable[Any]:
        """
        Make a public or private API request.

        Unknown method names raise InvalidMethodError immediately, before
        anything is scheduled.

        Args:
            method: API method name
            params: Arguments of the call; may be the callback instead
            callback: Optional ``callback(error, result)``

        Returns:
            Awaitable resolving to the decoded response
        """
        params, callback = _split_callback(params, callback)

        if classify_method(method) is MethodKind.PUBLIC:
            return self.public_method(method, params, callback)
        return self.private_method(method, params, callback)

    # ==================== public ====================

    def public_method(
        self,
        method: str,
        params: Optional[RequestParams] = None,
        callback: Optional[Callback] = None,
    ) -> Awaitable[Any]:
        """
        Make a public API request: GET {base_url}/api/v1/{method}/{param}.

        ``params["param"]`` is appended verbatim as the last path segment.
        """
        params, callback = _split_callback(params, callback)
        params = params if params is not None else {}

        url = self.config.base_url + self.public_path(method)
        param = params.get("param")
        if param is not None and param != "":
            url = f"{url}/{param}"

        return with_callback(self._send_public(method, url, params), callback)

    @log_api_call
    async def _send_public(self, method: str, url: str, params: RequestParams) -> Any:
        return await self.transport.send(url, {}, params, self.config.timeout_ms, "GET")

    # ==================== private ====================

    def prepare_private_request(self, method: str, params: RequestParams) -> PrivateRequest:
        """
        Normalise ``param``, inject ``nonce`` and ``otp`` and sign.

        ``params`` is updated in place.
        """
        if params.get("param") is None:
            params["param"] = ""
        elif method != "trade":
            params["param"] = f"/{params['param']}"

        path = self.private_path(method)
        # trade carries its free-form parameter in the body only
        url = self.config.base_url + path
        if method != "trade":
            url += params["param"]

        if not params.get("nonce"):
            params["nonce"] = self._nonces.next()

        if self.config.otp is not None:
            params["otp"] = self.config.otp

        signature = sign(path, params, self.config.api_secret, params["nonce"])
        logger.debug(f"Prepared private {method} request, nonce={params['nonce']}")

        return PrivateRequest(
            method=method,
            path=path,
            url=url,
            http_method=http_method_for(method),
            params=params,
            signature=signature,
        )

    def private_method(
        self,
        method: str,
        params: Optional[RequestParams] = None,
        callback: Optional[Callback] = None,
    ) -> Awaitable[Any]:
        """
        Make a private API request.

        Parameter preparation and signing happen synchronously; the token
        fetch and the request itself happen when the result is awaited (or
        at once when a callback is given).
        """
        params, callback = _split_callback(params, callback)
        params = params if params is not None else {}

        request = self.prepare_private_request(method, params)
        return with_callback(self._send_private(method, request), callback)

    @log_api_call
    async def _send_private(self, method: str, request: PrivateRequest) -> Any:
        if not self.config.has_credentials:
            logger.error(f"Private method {method} called without API credentials")
            raise ConfigurationError(
                "API key and secret are required for private methods",
                details={"method": method}
            )

        token = await self.token_provider.fetch_token(self.config.api_key, self.config.api_secret)

        headers = {"Authorization": token.authorization_header}
        if self.config.attach_signature:
            headers["API-Key"] = self.config.api_key
            headers["API-Sign"] = request.signature

        return await self.transport.send(
            request.url,
            headers,
            request.params,
            self.config.timeout_ms,
            request.http_method,
        )
