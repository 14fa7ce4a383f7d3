"""PKCS#7 signing of Apple Wallet pass manifests.

A .pkpass archive carries a ``manifest.json`` listing the SHA-1 digest of
every file, and a detached PKCS#7 ``signature`` of that manifest made with the
Pass Type ID certificate, chained to Apple's WWDR intermediate certificate.

NOTE: Apple Wallet still requires SHA-1 for the signature, which the
cryptography library refuses for PKCS#7, so signing shells out to OpenSSL.
"""

import hashlib
import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from wallet.apple.config import PKPassConfig
from wallet.exceptions import WalletError

logger = structlog.get_logger(__name__)

UNSIGNED_FILES = ("manifest.json", "signature")


class ApplePassSignerError(WalletError):
    """Raised when a pass manifest cannot be signed."""

    pass


class ApplePassSigner:
    """Signs pass manifests with the issuer's Pass Type ID certificate."""

    def __init__(
        self,
        cert_path: str,
        key_path: str,
        wwdr_cert_path: str,
        key_password: str | None = None,
    ) -> None:
        """Initialize the signer.

        Args:
            cert_path: Path to the Pass Type ID certificate (PEM format).
            key_path: Path to the private key (PEM format).
            wwdr_cert_path: Path to the Apple WWDR intermediate certificate.
            key_password: Password for the private key, if encrypted.
        """
        self.cert_path = cert_path
        self.key_path = key_path
        self.wwdr_cert_path = wwdr_cert_path
        self.key_password = key_password

        self._certificate: x509.Certificate | None = None
        self._private_key: Any = None
        self._wwdr_certificate: x509.Certificate | None = None

    @classmethod
    def from_config(cls, config: PKPassConfig) -> "ApplePassSigner":
        return cls(
            cert_path=config.cert_path,
            key_path=config.key_path,
            wwdr_cert_path=config.wwdr_cert_path,
            key_password=config.key_password or None,
        )

    def _load_certificate(self, path: str) -> x509.Certificate:
        try:
            return x509.load_pem_x509_certificate(Path(path).read_bytes())
        except FileNotFoundError:
            raise ApplePassSignerError(f"Certificate not found: {path}")
        except ValueError as e:
            raise ApplePassSignerError(f"Failed to load certificate {path}: {e}")

    def _load_private_key(self, path: str, password: str | None = None) -> Any:
        try:
            password_bytes = password.encode() if password else None
            return serialization.load_pem_private_key(Path(path).read_bytes(), password=password_bytes)
        except FileNotFoundError:
            raise ApplePassSignerError(f"Private key not found: {path}")
        except (TypeError, ValueError) as e:
            raise ApplePassSignerError(f"Failed to load private key {path}: {e}")

    @property
    def certificate(self) -> x509.Certificate:
        """Get the Pass Type ID certificate, loading if necessary."""
        if self._certificate is None:
            self._certificate = self._load_certificate(self.cert_path)
        return self._certificate

    @property
    def private_key(self) -> Any:
        """Get the private key, loading if necessary."""
        if self._private_key is None:
            self._private_key = self._load_private_key(self.key_path, self.key_password)
        return self._private_key

    @property
    def wwdr_certificate(self) -> x509.Certificate:
        """Get the Apple WWDR intermediate certificate, loading if necessary."""
        if self._wwdr_certificate is None:
            self._wwdr_certificate = self._load_certificate(self.wwdr_cert_path)
        return self._wwdr_certificate

    def validate_configuration(self) -> None:
        """Load every certificate and the key once to fail early on bad paths.

        Raises:
            ApplePassSignerError: If any of them cannot be loaded.
        """
        _ = self.certificate
        _ = self.private_key
        _ = self.wwdr_certificate
        logger.info("apple_wallet_signer_validated")

    def create_manifest(self, files: dict[str, bytes]) -> bytes:
        """Build ``manifest.json``: SHA-1 hex digest of every file in the pass.

        Args:
            files: Mapping of archive filename to content.

        Returns:
            The manifest as JSON bytes.
        """
        manifest = {
            filename: hashlib.sha1(content).hexdigest()
            for filename, content in files.items()
            if filename not in UNSIGNED_FILES
        }
        return json.dumps(manifest, indent=2).encode("utf-8")

    def sign_manifest(self, manifest_data: bytes) -> bytes:
        """Create the detached PKCS#7 signature of a manifest, in DER format.

        Raises:
            ApplePassSignerError: If OpenSSL fails or cannot be run.
        """
        with tempfile.TemporaryDirectory(prefix="pkpass-") as workdir:
            manifest_path = Path(workdir) / "manifest.json"
            signature_path = Path(workdir) / "signature"
            manifest_path.write_bytes(manifest_data)

            # openssl smime -sign -signer cert.pem -inkey key.pem -certfile wwdr.pem
            #   -in manifest.json -out signature -outform DER -binary
            cmd = [
                "openssl",
                "smime",
                "-sign",
                "-signer",
                self.cert_path,
                "-inkey",
                self.key_path,
                "-certfile",
                self.wwdr_cert_path,
                "-in",
                str(manifest_path),
                "-out",
                str(signature_path),
                "-outform",
                "DER",
                "-binary",
            ]
            if self.key_password:
                cmd.extend(["-passin", f"pass:{self.key_password}"])

            try:
                result = subprocess.run(cmd, capture_output=True, text=True, check=False)
            except OSError as e:
                logger.error("openssl_unavailable", error=str(e))
                raise ApplePassSignerError(f"Failed to run OpenSSL: {e}")

            if result.returncode != 0:
                logger.error("openssl_signing_failed", returncode=result.returncode, stderr=result.stderr)
                raise ApplePassSignerError(f"OpenSSL signing failed: {result.stderr}")

            signature = signature_path.read_bytes()

        logger.debug("manifest_signed", manifest_size=len(manifest_data), signature_size=len(signature))
        return signature
