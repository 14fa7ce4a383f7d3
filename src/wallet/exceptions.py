"""Exceptions raised by the wallet pass services.

The REST layer maps each of these onto an HTTP status code in
``api.exception_handlers``.
"""


class WalletError(Exception):
    """Base exception for wallet pass errors."""

    pass


class WalletConfigurationError(WalletError):
    """Raised when required issuer or credential settings are missing."""

    pass


class PassFieldsValidationError(WalletError):
    """Raised when caller-supplied pass fields miss a required entry."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human readable description of the problem.
            field: The dotted path of the offending field, if known.
        """
        super().__init__(message)
        self.field = field


class PassClassAlreadyExistsError(WalletError):
    """Raised when creating a class whose id already resolves."""

    def __init__(self, class_id: str) -> None:
        super().__init__(f"Class {class_id} already exists")
        self.class_id = class_id


class PassNotFoundError(WalletError):
    """Raised when no supported pass kind holds the requested id."""

    def __init__(self, resource_id: str, message: str | None = None) -> None:
        super().__init__(message or f"{resource_id} not found in any supported pass type")
        self.resource_id = resource_id


class UnsupportedPassKindError(WalletError):
    """Raised for a class or object type outside the supported kinds."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Pass type {kind} is not supported")
        self.kind = kind


class InvalidDateError(WalletError):
    """Raised when a date string cannot be parsed or formatted."""

    pass


class WalletBackendError(WalletError):
    """Raised when the pass-issuing backend rejects a request.

    Attributes:
        status_code: HTTP status code returned by the backend, if available.
        reason: Machine readable reason code (e.g. ``resourceNotFound``), if available.
    """

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error message returned by the backend.
            status_code: HTTP status code from the backend, if available.
            reason: Reason code of the first reported error, if available.
        """
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
