import hmac
import typing as t

import structlog
from django.conf import settings
from django.http import HttpRequest
from ninja.security import HttpBearer

logger = structlog.get_logger(__name__)


class ApiTokenAuth(HttpBearer):
    """Bearer token authentication against the configured API tokens.

    Tokens are read from ``settings.WALLET_API_TOKENS`` on every request, so
    overriding the setting in tests takes effect immediately. Requests without
    a configured token are rejected with 401.

    Usage:
        @api_controller("/wallet", auth=ApiTokenAuth())
        class WalletController(ControllerBase): ...
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Return the token when it matches a configured one.

        Args:
            request: The HTTP request object
            token: The bearer token string

        Returns:
            The token, or None to reject the request.
        """
        if not token:
            return None
        for allowed in settings.WALLET_API_TOKENS:
            if allowed and hmac.compare_digest(token.encode(), allowed.encode()):
                return token
        logger.warning("api_token_rejected", path=request.path)
        return None
