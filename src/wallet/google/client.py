"""Google Wallet API client.

Thin wrapper around the ``walletobjects`` v1 discovery client. It exposes the
generic get/insert/patch operations of ``WalletObjectsBackend`` and turns
``HttpError`` responses into ``WalletBackendError`` with the reason code of
the first reported error, e.g.::

    {"error": {"code": 404, "message": "...", "errors": [{"reason": "resourceNotFound"}]}}
"""

import typing as t

import orjson
import structlog
from google.auth.exceptions import RefreshError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from wallet.exceptions import WalletBackendError
from wallet.google.config import GoogleWalletConfig

logger = structlog.get_logger(__name__)

WALLET_OBJECT_ISSUER_SCOPE = "https://www.googleapis.com/auth/wallet_object.issuer"
REASON_AUTH_ERROR = "authError"


def parse_http_error(error: HttpError) -> WalletBackendError:
    """Translate a ``HttpError`` into a ``WalletBackendError``."""
    status_code = getattr(error.resp, "status", None)
    message = str(error)
    reason = None
    try:
        body = orjson.loads(error.content or b"{}")
    except orjson.JSONDecodeError:
        body = {}
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message") or message
        errors = body["error"].get("errors") or []
        if errors and isinstance(errors[0], dict):
            reason = errors[0].get("reason")
    return WalletBackendError(message, status_code=int(status_code) if status_code else None, reason=reason)


class GoogleWalletObjectsClient:
    """Issuer-authenticated client for Google Wallet classes and objects."""

    def __init__(self, config: GoogleWalletConfig, service: t.Any = None) -> None:
        """Initialize the client.

        Args:
            config: The issuer configuration.
            service: A prebuilt ``walletobjects`` service. Built from the config's
                service account credentials on first use if omitted.
        """
        self.config = config
        self._service = service

    @property
    def service(self) -> t.Any:
        """Get the ``walletobjects`` service, building it if needed."""
        if self._service is None:
            credentials = service_account.Credentials.from_service_account_info(
                self.config.service_account_info(),
                scopes=[WALLET_OBJECT_ISSUER_SCOPE],
            )
            self._service = build("walletobjects", "v1", credentials=credentials, cache_discovery=False)
        return self._service

    def get(self, resource: str, resource_id: str) -> dict[str, t.Any]:
        return self._execute(resource, "get", resourceId=resource_id)

    def insert(self, resource: str, body: dict[str, t.Any]) -> dict[str, t.Any]:
        return self._execute(resource, "insert", body=body)

    def patch(self, resource: str, resource_id: str, body: dict[str, t.Any]) -> dict[str, t.Any]:
        return self._execute(resource, "patch", resourceId=resource_id, body=body)

    def _execute(self, resource: str, method: str, **kwargs: t.Any) -> dict[str, t.Any]:
        collection = getattr(self.service, resource)()
        request = getattr(collection, method)(**kwargs)
        try:
            response = request.execute()
        except HttpError as e:
            error = parse_http_error(e)
            logger.debug(
                "google_wallet_request_failed",
                resource=resource,
                method=method,
                status_code=error.status_code,
                reason=error.reason,
            )
            raise error from e
        except RefreshError as e:
            logger.error("google_wallet_auth_failed", error=str(e))
            raise WalletBackendError(f"Failed to authenticate with Google Wallet: {e}", reason=REASON_AUTH_ERROR) from e
        return t.cast(dict[str, t.Any], response or {})
