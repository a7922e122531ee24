"""
Bearer token acquisition.

Exchanges the long-lived API key/secret for a short-lived access token via
the client-credentials grant. Tokens are not cached: every private call
fetches a fresh one.
"""

from pydantic import ValidationError

from buzzex.core.exceptions import AuthenticationError, TransportError, wrap_exception
from buzzex.core.logger import get_logger
from buzzex.models.auth import Token
from buzzex.transport.http import HTTPTransport

logger = get_logger(__name__)

TOKEN_PATH = "/api/token"


class TokenProvider:
    """Credential-grant client for POST {base_url}/api/token"""

    def __init__(self, transport: HTTPTransport, base_url: str, timeout_ms: int):
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms

    @property
    def token_url(self) -> str:
        return f"{self.base_url}{TOKEN_PATH}"

    async def fetch_token(self, key: str, secret: str) -> Token:
        """
        Fetch a fresh access token.

        Args:
            key: API key (client_id)
            secret: API secret (client_secret)

        Returns:
            Token

        Raises:
            TransportError: The token request did not complete
            MalformedResponseError: Token endpoint answered with non-JSON
            AuthenticationError: Credentials rejected or no usable access_token returned
        """
        logger.debug("Getting token...")

        payload = {
            "grant_type": "client_credentials",
            "client_id": key,
            "client_secret": secret,
        }

        try:
            body = await self.transport.post_json(self.token_url, payload, self.timeout_ms)
        except TransportError as e:
            if e.details.get("status") in (400, 401, 403):
                logger.warning(f"Credential grant rejected with HTTP {e.details['status']}")
                raise AuthenticationError(
                    "Credential grant rejected",
                    details={"status": e.details["status"]},
                    original_exception=e
                )
            raise

        if not isinstance(body, dict) or not body.get("access_token"):
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"Token endpoint returned no access_token: {error}")
            raise AuthenticationError(
                "Token endpoint returned no access_token",
                details={"error": error} if error else None
            )

        try:
            token = Token.model_validate(body)
        except ValidationError as e:
            logger.warning("Token endpoint returned an invalid token")
            raise wrap_exception(
                e,
                AuthenticationError,
                "Token endpoint returned an invalid token",
                fields=sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            )

        logger.debug("Token acquired")
        return token
