"""Apple Wallet (PKPass) issuer configuration."""

import typing as t
from dataclasses import dataclass, field

from django.conf import settings

from wallet.exceptions import WalletConfigurationError


@dataclass(frozen=True)
class PKPassConfig:
    """Issuer settings for signing Apple Wallet passes.

    Attributes:
        pass_type_identifier: Pass Type ID registered with Apple (``pass.org.example.app``).
        team_identifier: Apple developer team id.
        organization_name: Organization shown on the pass.
        cert_path: Pass Type ID certificate (PEM).
        key_path: Private key of the certificate (PEM).
        wwdr_cert_path: Apple WWDR intermediate certificate (PEM).
        icon_url: URL of the pass icon, required by Apple Wallet.
        key_password: Password of the private key, if encrypted.
        logo_url: URL of the pass logo.
        logo_text: Text shown next to the logo.
    """

    pass_type_identifier: str
    team_identifier: str
    organization_name: str
    cert_path: str
    key_path: str
    wwdr_cert_path: str
    icon_url: str
    key_password: str = field(default="", repr=False)
    logo_url: str = ""
    logo_text: str = ""

    REQUIRED_SETTINGS: t.ClassVar[dict[str, str]] = {
        "pass_type_identifier": "APPLE_WALLET_PASS_TYPE_ID",
        "team_identifier": "APPLE_WALLET_TEAM_ID",
        "organization_name": "APPLE_WALLET_ORGANIZATION_NAME",
        "cert_path": "APPLE_WALLET_CERT_PATH",
        "key_path": "APPLE_WALLET_KEY_PATH",
        "wwdr_cert_path": "APPLE_WALLET_WWDR_CERT_PATH",
        "icon_url": "APPLE_WALLET_ICON_URL",
    }

    def __post_init__(self) -> None:
        for attribute, setting_name in self.REQUIRED_SETTINGS.items():
            if not getattr(self, attribute):
                raise WalletConfigurationError(f"{setting_name} not configured")

    @classmethod
    def from_settings(cls) -> "PKPassConfig":
        """Build the config from Django settings.

        Raises:
            WalletConfigurationError: If a required setting is missing.
        """
        return cls(
            pass_type_identifier=settings.APPLE_WALLET_PASS_TYPE_ID,
            team_identifier=settings.APPLE_WALLET_TEAM_ID,
            organization_name=settings.APPLE_WALLET_ORGANIZATION_NAME,
            cert_path=settings.APPLE_WALLET_CERT_PATH,
            key_path=settings.APPLE_WALLET_KEY_PATH,
            wwdr_cert_path=settings.APPLE_WALLET_WWDR_CERT_PATH,
            icon_url=settings.APPLE_WALLET_ICON_URL,
            key_password=settings.APPLE_WALLET_KEY_PASSWORD,
            logo_url=settings.APPLE_WALLET_LOGO_URL,
            logo_text=settings.APPLE_WALLET_LOGO_TEXT,
        )
