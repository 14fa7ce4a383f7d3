"""Wallet service for pass issuing and management.

This module provides the main service layer for wallet pass operations,
orchestrating Google Wallet class and object management and Apple Wallet
pass generation.
"""

import typing as t

from wallet.apple.config import PKPassConfig
from wallet.apple.generator import ApplePassGenerator
from wallet.google.classes import PassClassService
from wallet.google.client import GoogleWalletObjectsClient
from wallet.google.config import GoogleWalletConfig
from wallet.google.kinds import PassKind
from wallet.google.models import PassObject
from wallet.google.normalizer import FieldNormalizer
from wallet.google.objects import PassObjectService
from wallet.protocols import PassFileIssuer, WalletObjectsBackend


class WalletService:
    """Service for managing wallet passes.

    This service provides a unified interface for:
    - Creating Google Wallet pass classes and checking their existence
    - Creating, fetching and expiring Google Wallet pass objects
    - Issuing signed Apple Wallet passes

    Collaborators are built from Django settings on first use unless injected.
    """

    def __init__(
        self,
        google_config: GoogleWalletConfig | None = None,
        google_backend: WalletObjectsBackend | None = None,
        apple_issuer: PassFileIssuer | None = None,
    ) -> None:
        """Initialize the wallet service.

        Args:
            google_config: Google Wallet issuer configuration.
            google_backend: Backend for Google Wallet classes and objects.
            apple_issuer: Issuer of Apple Wallet pass files.
        """
        self._google_config = google_config
        self._google_backend = google_backend
        self._apple_issuer = apple_issuer
        self._class_service: PassClassService | None = None
        self._object_service: PassObjectService | None = None

    @property
    def google_config(self) -> GoogleWalletConfig:
        """Get the Google Wallet configuration, loading it from settings if needed.

        Raises:
            WalletConfigurationError: If a required setting is missing.
        """
        if self._google_config is None:
            self._google_config = GoogleWalletConfig.from_settings()
        return self._google_config

    @property
    def google_backend(self) -> WalletObjectsBackend:
        """Get the Google Wallet backend, creating if needed."""
        if self._google_backend is None:
            self._google_backend = GoogleWalletObjectsClient(self.google_config)
        return self._google_backend

    @property
    def class_service(self) -> PassClassService:
        """Get the pass class service, creating if needed."""
        if self._class_service is None:
            self._class_service = PassClassService(self.google_backend, self.google_config.issuer_id)
        return self._class_service

    @property
    def object_service(self) -> PassObjectService:
        """Get the pass object service, creating if needed."""
        if self._object_service is None:
            self._object_service = PassObjectService(
                self.google_backend,
                self.google_config.issuer_id,
                class_service=self.class_service,
                normalizer=FieldNormalizer(grace_interval=self.google_config.valid_time_interval_end_grace),
            )
        return self._object_service

    @property
    def apple_issuer(self) -> PassFileIssuer:
        """Get the Apple pass generator, creating and checking its certificates if needed.

        Raises:
            WalletConfigurationError: If the Apple Wallet settings are incomplete.
            ApplePassSignerError: If a certificate or the private key cannot be loaded.
        """
        if self._apple_issuer is None:
            generator = ApplePassGenerator(PKPassConfig.from_settings())
            generator.signer.validate_configuration()
            self._apple_issuer = generator
        return self._apple_issuer

    # -------------------------------------------------------------------------
    # Google Wallet
    # -------------------------------------------------------------------------

    def create_class(
        self,
        class_suffix: str,
        class_fields: t.Mapping[str, t.Any],
        class_type: str = PassKind.EVENT_TICKET.value,
    ) -> bool:
        """Create a Google Wallet pass class.

        Raises:
            UnsupportedPassKindError: If ``class_type`` is not a supported kind.
            PassFieldsValidationError: If a required class field is missing.
            PassClassAlreadyExistsError: If the class already exists.
            WalletBackendError: If the backend rejects the request.
        """
        return self.class_service.create_class(class_suffix, class_fields, class_type)

    def class_exists(self, class_suffix: str) -> bool:
        return self.class_service.class_exists(class_suffix)

    def create_ticket(
        self,
        class_suffix: str,
        object_suffix: str,
        ticket_fields: t.Mapping[str, t.Any] | None = None,
    ) -> str:
        """Create a Google Wallet pass object, returning its id.

        Existing objects are left untouched and their id is returned.
        """
        return self.object_service.create_ticket(class_suffix, object_suffix, ticket_fields)

    def get_ticket(self, object_suffix: str) -> PassObject | str:
        return self.object_service.get_ticket(object_suffix)

    def expire_ticket(self, object_suffix: str) -> bool:
        return self.object_service.expire_ticket(object_suffix)

    # -------------------------------------------------------------------------
    # Apple Wallet
    # -------------------------------------------------------------------------

    def issue_apple_pass(self, fields: dict[str, t.Any]) -> bytes:
        """Generate a signed Apple Wallet pass.

        Raises:
            WalletConfigurationError: If the Apple Wallet settings are incomplete.
            PassFieldsValidationError: If a required pass field is missing.
            ApplePassGeneratorError: If an image cannot be downloaded.
            ApplePassSignerError: If the manifest cannot be signed.
        """
        return self.apple_issuer.issue_pass(fields)


# Module-level singleton instance
_wallet_service: WalletService | None = None


def get_wallet_service() -> WalletService:
    """Get the wallet service singleton.

    Returns:
        The WalletService instance.
    """
    global _wallet_service
    if _wallet_service is None:
        _wallet_service = WalletService()
    return _wallet_service
