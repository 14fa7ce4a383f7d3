from django.conf import settings
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from common.schema import ResponseOk, VersionResponse
from wallet.apple.generator import ApplePassGeneratorError
from wallet.apple.signer import ApplePassSignerError
from wallet.controllers import GoogleWalletController, PKPassController
from wallet.exceptions import (
    InvalidDateError,
    PassClassAlreadyExistsError,
    PassFieldsValidationError,
    PassNotFoundError,
    UnsupportedPassKindError,
    WalletBackendError,
    WalletConfigurationError,
)

from .exception_handlers import (
    handle_already_exists_error,
    handle_bad_request_error,
    handle_general_exception,
    handle_not_found_error,
    handle_pass_generation_error,
    handle_wallet_backend_error,
    handle_wallet_configuration_error,
)

api = NinjaExtraAPI(
    title="Passhub API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Passhub wallet pass API {settings.VERSION}",
    app_name=f"passhub-api-{settings.VERSION}",
    urls_namespace="api",
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    GoogleWalletController,
    PKPassController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    WalletConfigurationError: handle_wallet_configuration_error,
    PassFieldsValidationError: handle_bad_request_error,
    UnsupportedPassKindError: handle_bad_request_error,
    InvalidDateError: handle_bad_request_error,
    PassClassAlreadyExistsError: handle_already_exists_error,
    PassNotFoundError: handle_not_found_error,
    WalletBackendError: handle_wallet_backend_error,
    ApplePassGeneratorError: handle_pass_generation_error,
    ApplePassSignerError: handle_pass_generation_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
