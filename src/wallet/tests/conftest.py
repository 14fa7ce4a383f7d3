"""Test fixtures for wallet app tests.

This module provides an in-memory Google Wallet backend, issuer settings,
mocked certificates for Apple Wallet signing and pre-configured services.
"""

import typing as t
from collections.abc import Generator
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from wallet.apple.config import PKPassConfig
from wallet.apple.generator import ApplePassGenerator
from wallet.apple.signer import ApplePassSigner
from wallet.google.classes import PassClassService
from wallet.google.config import GoogleWalletConfig
from wallet.google.objects import PassObjectService
from wallet.service import WalletService
from wallet.tests.fakes import ISSUER_ID, PNG_BYTES, FakeWalletObjectsBackend

# --- Google Wallet Fixtures ---


@pytest.fixture
def backend() -> FakeWalletObjectsBackend:
    return FakeWalletObjectsBackend()


@pytest.fixture
def class_service(backend: FakeWalletObjectsBackend) -> PassClassService:
    return PassClassService(backend, ISSUER_ID)


@pytest.fixture
def object_service(backend: FakeWalletObjectsBackend, class_service: PassClassService) -> PassObjectService:
    return PassObjectService(backend, ISSUER_ID, class_service=class_service)


@pytest.fixture
def class_fields() -> dict[str, t.Any]:
    """Minimal valid fields for an event ticket class."""
    return {
        "eventName": {"defaultValue": {"language": "en-US", "value": "Summer Gala"}},
        "issuerName": "Example Issuer",
    }


@pytest.fixture
def event_ticket_class(backend: FakeWalletObjectsBackend) -> dict[str, t.Any]:
    """An event ticket class stored in the backend under suffix ``gala``."""
    payload = {
        "id": f"{ISSUER_ID}.gala",
        "issuerName": "Example Issuer",
        "reviewStatus": "UNDER_REVIEW",
    }
    backend.add("eventticketclass", payload)
    return payload


@pytest.fixture
def google_config() -> GoogleWalletConfig:
    return GoogleWalletConfig(
        issuer_id=ISSUER_ID,
        service_account_credentials={"type": "service_account", "client_email": "issuer@example.iam"},
        valid_time_interval_end_grace="P1D",
    )


@pytest.fixture
def google_wallet_configured(settings: t.Any) -> None:
    """Configure Google Wallet settings for tests."""
    settings.GOOGLE_WALLET_ISSUER_ID = ISSUER_ID
    settings.GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS = '{"type": "service_account"}'
    settings.GOOGLE_WALLET_VALID_TIME_INTERVAL_END_GRACE = "P0D"


@pytest.fixture
def google_wallet_not_configured(settings: t.Any) -> None:
    """Clear Google Wallet settings for tests."""
    settings.GOOGLE_WALLET_ISSUER_ID = ""
    settings.GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS = ""


# --- Mock Certificate Fixtures ---


def _build_certificate(private_key: rsa.RSAPrivateKey, common_name: str, organization: str) -> x509.Certificate:
    subject = issuer = x509.Name(
        [
            x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )
    now = datetime.now(dt_timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
        .sign(private_key, hashes.SHA256())
    )


@pytest.fixture
def mock_private_key() -> rsa.RSAPrivateKey:
    """Generate a mock RSA private key for testing."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def mock_certificate(mock_private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Generate a mock Pass Type ID certificate for testing."""
    return _build_certificate(mock_private_key, "Pass Type ID: pass.com.example.test", "Test Org")


@pytest.fixture
def mock_wwdr_certificate(mock_private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Generate a mock Apple WWDR certificate for testing."""
    return _build_certificate(
        mock_private_key,
        "Apple Worldwide Developer Relations Certification Authority",
        "Apple Inc.",
    )


@pytest.fixture
def certificate_files(
    tmp_path: Path,
    mock_private_key: rsa.RSAPrivateKey,
    mock_certificate: x509.Certificate,
    mock_wwdr_certificate: x509.Certificate,
) -> dict[str, str]:
    """Write the mock certificates and key to PEM files."""
    cert_path = tmp_path / "cert.pem"
    key_path = tmp_path / "key.pem"
    wwdr_path = tmp_path / "wwdr.pem"
    cert_path.write_bytes(mock_certificate.public_bytes(serialization.Encoding.PEM))
    wwdr_path.write_bytes(mock_wwdr_certificate.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        mock_private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return {"cert_path": str(cert_path), "key_path": str(key_path), "wwdr_cert_path": str(wwdr_path)}


@pytest.fixture
def mock_signer() -> MagicMock:
    """Create a fully mocked ApplePassSigner for testing."""
    signer = MagicMock(spec=ApplePassSigner)
    unsigned = ApplePassSigner(cert_path="", key_path="", wwdr_cert_path="")
    signer.create_manifest.side_effect = unsigned.create_manifest
    signer.sign_manifest.return_value = b"mock_signature_bytes"
    return signer


# --- Apple Wallet Fixtures ---


@pytest.fixture
def pkpass_config() -> PKPassConfig:
    return PKPassConfig(
        pass_type_identifier="pass.com.example.test",
        team_identifier="TEAM123",
        organization_name="Example Org",
        cert_path="/path/cert.pem",
        key_path="/path/key.pem",
        wwdr_cert_path="/path/wwdr.pem",
        icon_url="https://cdn.example.com/icon.png",
        logo_url="https://cdn.example.com/logo.png",
        logo_text="Example",
    )


@pytest.fixture
def image_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def image_client(image_requests: list[httpx.Request]) -> httpx.Client:
    """HTTP client serving a PNG for every request."""

    def handler(request: httpx.Request) -> httpx.Response:
        image_requests.append(request)
        return httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/png"})

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def generator(pkpass_config: PKPassConfig, mock_signer: MagicMock, image_client: httpx.Client) -> ApplePassGenerator:
    return ApplePassGenerator(pkpass_config, signer=mock_signer, http_client=image_client)


@pytest.fixture
def pkpass_fields() -> dict[str, t.Any]:
    return {
        "description": "Summer Gala Ticket",
        "serialNumber": "1234567890",
        "passType": "eventTicket",
        "passValue": {"primaryFields": [{"key": "event", "label": "EVENT", "value": "Summer Gala"}]},
    }


@pytest.fixture
def apple_wallet_configured(settings: t.Any) -> None:
    """Configure Apple Wallet settings for tests."""
    settings.APPLE_WALLET_PASS_TYPE_ID = "pass.com.example.test"
    settings.APPLE_WALLET_TEAM_ID = "TEAM123"
    settings.APPLE_WALLET_ORGANIZATION_NAME = "Example Org"
    settings.APPLE_WALLET_CERT_PATH = "/path/cert.pem"
    settings.APPLE_WALLET_KEY_PATH = "/path/key.pem"
    settings.APPLE_WALLET_KEY_PASSWORD = ""
    settings.APPLE_WALLET_WWDR_CERT_PATH = "/path/wwdr.pem"
    settings.APPLE_WALLET_ICON_URL = "https://cdn.example.com/icon.png"
    settings.APPLE_WALLET_LOGO_URL = ""
    settings.APPLE_WALLET_LOGO_TEXT = ""


@pytest.fixture
def apple_wallet_not_configured(settings: t.Any) -> None:
    """Clear Apple Wallet settings for tests."""
    settings.APPLE_WALLET_PASS_TYPE_ID = ""
    settings.APPLE_WALLET_TEAM_ID = ""
    settings.APPLE_WALLET_CERT_PATH = ""
    settings.APPLE_WALLET_KEY_PATH = ""
    settings.APPLE_WALLET_WWDR_CERT_PATH = ""


# --- Service Fixtures ---


@pytest.fixture
def wallet_service(
    google_config: GoogleWalletConfig,
    backend: FakeWalletObjectsBackend,
    generator: ApplePassGenerator,
) -> WalletService:
    return WalletService(google_config=google_config, google_backend=backend, apple_issuer=generator)


@pytest.fixture
def patched_wallet_service(wallet_service: WalletService) -> Generator[WalletService, None, None]:
    """Serve ``wallet_service`` from the controllers' service lookup."""
    with patch("wallet.controllers.get_wallet_service", return_value=wallet_service):
        yield wallet_service
