"""Tests for wallet/apple/signer.py."""

import hashlib
import json
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa

from wallet.apple.config import PKPassConfig
from wallet.apple.signer import ApplePassSigner, ApplePassSignerError
from wallet.exceptions import WalletError


@pytest.fixture
def signer(certificate_files: dict[str, str]) -> ApplePassSigner:
    return ApplePassSigner(**certificate_files)


class TestApplePassSignerInit:
    """Tests for ApplePassSigner initialization."""

    def test_from_config(self, pkpass_config: PKPassConfig) -> None:
        signer = ApplePassSigner.from_config(pkpass_config)

        assert signer.cert_path == "/path/cert.pem"
        assert signer.key_path == "/path/key.pem"
        assert signer.wwdr_cert_path == "/path/wwdr.pem"
        assert signer.key_password is None

    def test_init_certs_not_loaded(self) -> None:
        """Certificates should not be loaded until accessed."""
        signer = ApplePassSigner(
            cert_path="/path/cert.pem",
            key_path="/path/key.pem",
            wwdr_cert_path="/path/wwdr.pem",
        )

        assert signer._certificate is None
        assert signer._private_key is None
        assert signer._wwdr_certificate is None

    def test_errors_are_wallet_errors(self) -> None:
        assert issubclass(ApplePassSignerError, WalletError)


class TestApplePassSignerLoadCertificate:
    """Tests for certificate loading."""

    def test_loads_pem_files(
        self,
        signer: ApplePassSigner,
        mock_certificate: x509.Certificate,
        mock_wwdr_certificate: x509.Certificate,
    ) -> None:
        assert signer.certificate.serial_number == mock_certificate.serial_number
        assert signer.wwdr_certificate.serial_number == mock_wwdr_certificate.serial_number
        assert isinstance(signer.private_key, rsa.RSAPrivateKey)

    def test_load_certificate_file_not_found(self) -> None:
        signer = ApplePassSigner(
            cert_path="/nonexistent/cert.pem",
            key_path="/path/key.pem",
            wwdr_cert_path="/path/wwdr.pem",
        )

        with pytest.raises(ApplePassSignerError, match="Certificate not found"):
            _ = signer.certificate

    def test_load_private_key_file_not_found(self) -> None:
        signer = ApplePassSigner(
            cert_path="/path/cert.pem",
            key_path="/nonexistent/key.pem",
            wwdr_cert_path="/path/wwdr.pem",
        )

        with pytest.raises(ApplePassSignerError, match="Private key not found"):
            _ = signer.private_key

    def test_load_certificate_invalid_format(self, tmp_path: Path) -> None:
        cert_file = tmp_path / "invalid.pem"
        cert_file.write_text("not a valid certificate")

        signer = ApplePassSigner(
            cert_path=str(cert_file),
            key_path="/path/key.pem",
            wwdr_cert_path="/path/wwdr.pem",
        )

        with pytest.raises(ApplePassSignerError, match="Failed to load certificate"):
            _ = signer.certificate

    def test_load_private_key_invalid_format(self, tmp_path: Path) -> None:
        key_file = tmp_path / "invalid.key"
        key_file.write_text("not a valid key")

        signer = ApplePassSigner(
            cert_path="/path/cert.pem",
            key_path=str(key_file),
            wwdr_cert_path="/path/wwdr.pem",
        )

        with pytest.raises(ApplePassSignerError, match="Failed to load private key"):
            _ = signer.private_key

    def test_certificate_cached_after_load(self, mock_certificate: x509.Certificate) -> None:
        """Certificate should be cached after first load."""
        signer = ApplePassSigner(
            cert_path="/path/cert.pem",
            key_path="/path/key.pem",
            wwdr_cert_path="/path/wwdr.pem",
        )

        with patch.object(signer, "_load_certificate", return_value=mock_certificate) as mock_load:
            cert1 = signer.certificate
            cert2 = signer.certificate

            mock_load.assert_called_once()
            assert cert1 is cert2


class TestApplePassSignerCreateManifest:
    """Tests for manifest creation."""

    def test_creates_manifest_with_sha1_hashes(self) -> None:
        signer = ApplePassSigner(cert_path="", key_path="", wwdr_cert_path="")
        files = {
            "pass.json": b'{"formatVersion": 1}',
            "icon.png": b"fake_icon_data",
        }

        manifest_dict = json.loads(signer.create_manifest(files))

        assert manifest_dict == {
            "pass.json": hashlib.sha1(b'{"formatVersion": 1}').hexdigest(),
            "icon.png": hashlib.sha1(b"fake_icon_data").hexdigest(),
        }

    def test_excludes_manifest_and_signature(self) -> None:
        signer = ApplePassSigner(cert_path="", key_path="", wwdr_cert_path="")
        files = {
            "pass.json": b'{"formatVersion": 1}',
            "manifest.json": b'{"existing": "manifest"}',
            "signature": b"existing_signature",
        }

        manifest_dict = json.loads(signer.create_manifest(files))

        assert list(manifest_dict) == ["pass.json"]

    def test_empty_files_produces_empty_manifest(self) -> None:
        signer = ApplePassSigner(cert_path="", key_path="", wwdr_cert_path="")

        assert json.loads(signer.create_manifest({})) == {}


class TestApplePassSignerSignManifest:
    """Tests for manifest signing through OpenSSL."""

    def test_runs_openssl_and_returns_signature(self, signer: ApplePassSigner) -> None:
        def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            signed = Path(cmd[cmd.index("-in") + 1]).read_bytes()
            Path(cmd[cmd.index("-out") + 1]).write_bytes(b"\x30signed:" + signed)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        with patch("wallet.apple.signer.subprocess.run", side_effect=fake_run) as mock_run:
            signature = signer.sign_manifest(b'{"pass.json": "abc123"}')

        assert signature == b'\x30signed:{"pass.json": "abc123"}'
        cmd = mock_run.call_args.args[0]
        assert cmd[:3] == ["openssl", "smime", "-sign"]
        assert cmd[cmd.index("-signer") + 1] == signer.cert_path
        assert cmd[cmd.index("-inkey") + 1] == signer.key_path
        assert cmd[cmd.index("-certfile") + 1] == signer.wwdr_cert_path
        assert cmd[cmd.index("-outform") + 1] == "DER"
        assert "-binary" in cmd
        assert "-passin" not in cmd

    def test_passes_key_password(self, certificate_files: dict[str, str]) -> None:
        signer = ApplePassSigner(**certificate_files, key_password="secret")

        def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            Path(cmd[cmd.index("-out") + 1]).write_bytes(b"\x30")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        with patch("wallet.apple.signer.subprocess.run", side_effect=fake_run) as mock_run:
            signer.sign_manifest(b"{}")

        cmd = mock_run.call_args.args[0]
        assert cmd[cmd.index("-passin") + 1] == "pass:secret"

    def test_raises_on_openssl_failure(self, signer: ApplePassSigner) -> None:
        failed = subprocess.CompletedProcess(["openssl"], 1, stdout="", stderr="unable to load certificate")

        with patch("wallet.apple.signer.subprocess.run", return_value=failed):
            with pytest.raises(ApplePassSignerError, match="OpenSSL signing failed: unable to load certificate"):
                signer.sign_manifest(b'{"test": "data"}')

    def test_raises_when_openssl_cannot_run(self, signer: ApplePassSigner) -> None:
        with patch("wallet.apple.signer.subprocess.run", side_effect=FileNotFoundError("openssl")):
            with pytest.raises(ApplePassSignerError, match="Failed to run OpenSSL"):
                signer.sign_manifest(b'{"test": "data"}')


class TestApplePassSignerValidateConfiguration:
    """Tests for validate_configuration method."""

    def test_succeeds_when_all_certs_loadable(self, signer: ApplePassSigner) -> None:
        signer.validate_configuration()

        assert signer._certificate is not None
        assert signer._private_key is not None
        assert signer._wwdr_certificate is not None

    def test_raises_when_wwdr_cert_not_loadable(self, certificate_files: dict[str, str]) -> None:
        signer = ApplePassSigner(**{**certificate_files, "wwdr_cert_path": "/nonexistent/wwdr.pem"})

        with pytest.raises(ApplePassSignerError, match="Certificate not found: /nonexistent/wwdr.pem"):
            signer.validate_configuration()
