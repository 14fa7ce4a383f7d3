"""Google Wallet issuer configuration."""

import typing as t
from dataclasses import dataclass, field
from pathlib import Path

import orjson
from django.conf import settings

from wallet.exceptions import InvalidDateError, WalletConfigurationError
from wallet.google.formatting import ZERO_INTERVAL, parse_duration


@dataclass(frozen=True)
class GoogleWalletConfig:
    """Settings needed to talk to Google Wallet as one issuer.

    Attributes:
        issuer_id: The issuer id from the Google Pay & Wallet console.
        service_account_credentials: Service account key, as a dict, a JSON string or a key file path.
        valid_time_interval_end_grace: ISO 8601 duration added to ``validTimeInterval.end``.
    """

    issuer_id: str
    service_account_credentials: dict[str, t.Any] | str = field(repr=False)
    valid_time_interval_end_grace: str = ZERO_INTERVAL

    def __post_init__(self) -> None:
        if not self.issuer_id:
            raise WalletConfigurationError("GOOGLE_WALLET_ISSUER_ID not configured")
        if not self.service_account_credentials:
            raise WalletConfigurationError("GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS not configured")
        try:
            parse_duration(self.valid_time_interval_end_grace)
        except InvalidDateError as e:
            raise WalletConfigurationError(f"GOOGLE_WALLET_VALID_TIME_INTERVAL_END_GRACE is invalid: {e}")

    @classmethod
    def from_settings(cls) -> "GoogleWalletConfig":
        """Build the config from Django settings.

        Raises:
            WalletConfigurationError: If a required setting is missing or invalid.
        """
        return cls(
            issuer_id=settings.GOOGLE_WALLET_ISSUER_ID,
            service_account_credentials=settings.GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS,
            valid_time_interval_end_grace=settings.GOOGLE_WALLET_VALID_TIME_INTERVAL_END_GRACE or ZERO_INTERVAL,
        )

    def service_account_info(self) -> dict[str, t.Any]:
        """Return the service account key as a dict.

        Raises:
            WalletConfigurationError: If the key cannot be read or parsed.
        """
        credentials = self.service_account_credentials
        if isinstance(credentials, dict):
            return credentials
        try:
            if credentials.lstrip().startswith("{"):
                return t.cast(dict[str, t.Any], orjson.loads(credentials))
            return t.cast(dict[str, t.Any], orjson.loads(Path(credentials).read_bytes()))
        except FileNotFoundError:
            raise WalletConfigurationError(f"Service account key file not found: {credentials}")
        except orjson.JSONDecodeError as e:
            raise WalletConfigurationError(f"Service account credentials are not valid JSON: {e}")
