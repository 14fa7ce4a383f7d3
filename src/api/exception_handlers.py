"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.http import HttpRequest
from ninja.responses import Response

from wallet.exceptions import (
    PassClassAlreadyExistsError,
    PassNotFoundError,
    WalletBackendError,
    WalletConfigurationError,
    WalletError,
)

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    metadata: dict[str, t.Any] = {
        "headers": obfuscate(dict(request.headers)),
        "method": request.method,
        "path": request.path,
        "GET": obfuscate(request.GET.dict()),
    }
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            metadata["json_payload"] = obfuscate(orjson.loads(request.body))
        except orjson.JSONDecodeError:  # pragma: no cover
            metadata["json_payload"] = None
    logger.exception("INTERNAL_SERVER_ERROR", exc_info=True, stack_info=True, **metadata)
    data = {"detail": "Internal Server Error."}
    if settings.DEBUG:  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_wallet_configuration_error(
    request: HttpRequest, exc: WalletConfigurationError | t.Type[WalletConfigurationError]
) -> Response:
    """Handle missing issuer settings: the wallet is unavailable, not broken."""
    logger.error("wallet_not_configured", path=request.path, error=str(exc))
    return Response(status=503, data={"detail": str(exc)})


def handle_bad_request_error(request: HttpRequest, exc: WalletError | t.Type[WalletError]) -> Response:
    """Handle invalid pass fields, dates and unsupported pass types."""
    data: dict[str, t.Any] = {"detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        data["field"] = field
    return Response(status=400, data=data)


def handle_already_exists_error(
    request: HttpRequest, exc: PassClassAlreadyExistsError | t.Type[PassClassAlreadyExistsError]
) -> Response:
    """Handle an already existing pass class."""
    return Response(status=409, data={"detail": str(exc)})


def handle_not_found_error(request: HttpRequest, exc: PassNotFoundError | t.Type[PassNotFoundError]) -> Response:
    """Handle a pass class or object that no supported pass type holds."""
    return Response(status=404, data={"detail": str(exc)})


def handle_wallet_backend_error(request: HttpRequest, exc: WalletBackendError | t.Type[WalletBackendError]) -> Response:
    """Handle a request rejected by the pass-issuing backend."""
    logger.error(
        "wallet_backend_error",
        path=request.path,
        status_code=getattr(exc, "status_code", None),
        reason=getattr(exc, "reason", None),
        error=str(exc),
    )
    return Response(status=502, data={"detail": str(exc), "reason": getattr(exc, "reason", None)})


def handle_pass_generation_error(request: HttpRequest, exc: WalletError | t.Type[WalletError]) -> Response:
    """Handle a pass file that could not be generated or signed."""
    logger.error("pass_generation_failed", path=request.path, error=str(exc))
    return Response(status=500, data={"detail": "Failed to generate pass."})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
