"""Apple Wallet pass generator.

This module generates .pkpass files from a flat field bag. A .pkpass file is
a ZIP archive containing:
- pass.json: The pass definition
- manifest.json: SHA-1 hashes of all files
- signature: PKCS#7 signature of the manifest
- Images: icon (required) and logo, downloaded from the configured URLs
"""

import io
import json
import typing as t
import zipfile

import httpx
import structlog

from wallet.apple.config import PKPassConfig
from wallet.apple.signer import ApplePassSigner
from wallet.exceptions import PassFieldsValidationError, WalletError

logger = structlog.get_logger(__name__)

FORMAT_VERSION = 1

ICON_FILENAME = "icon.png"
LOGO_FILENAME = "logo.png"

REQUIRED_FIELDS = ("description", "serialNumber", "passType", "passValue")
OPTIONAL_FIELDS = ("relevantDate", "barcodes", "backgroundColor", "foregroundColor", "labelColor")


class ApplePassGeneratorError(WalletError):
    """Raised when pass generation fails."""

    pass


class ApplePassGenerator:
    """Generates signed Apple Wallet .pkpass files."""

    CONTENT_TYPE = "application/vnd.apple.pkpass"
    FILE_EXTENSION = "pkpass"

    def __init__(
        self,
        config: PKPassConfig,
        signer: ApplePassSigner | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: The pass issuer configuration.
            signer: The signer to use for creating signatures.
                   If not provided, one is created from the config.
            http_client: Client used to download the pass images.
        """
        self.config = config
        self.signer = signer or ApplePassSigner.from_config(config)
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=httpx.Timeout(30.0, connect=10.0), follow_redirects=True)
        return self._http_client

    def get_pass_content_type(self) -> str:
        """Get the MIME content type for Apple passes."""
        return self.CONTENT_TYPE

    def get_pass_file_extension(self) -> str:
        """Get the file extension for Apple passes."""
        return self.FILE_EXTENSION

    def issue_pass(self, fields: t.Mapping[str, t.Any]) -> bytes:
        """Generate a .pkpass file.

        Args:
            fields: The pass fields. ``description``, ``serialNumber``, ``passType``
                and ``passValue`` are required; ``passValue`` is stored under the
                ``passType`` key (e.g. ``eventTicket``). ``relevantDate``,
                ``barcodes`` and the three colors are copied when present; any
                other key is ignored.

        Returns:
            The .pkpass file as bytes.

        Raises:
            PassFieldsValidationError: If a required field is missing.
            ApplePassGeneratorError: If an image cannot be downloaded.
            ApplePassSignerError: If the manifest cannot be signed.
        """
        self.validate_fields(fields)

        files: dict[str, bytes] = {"pass.json": self._generate_pass_json(fields)}
        files[ICON_FILENAME] = self._download_image(self.config.icon_url)
        if self.config.logo_url:
            files[LOGO_FILENAME] = self._download_image(self.config.logo_url)

        manifest = self.signer.create_manifest(files)
        files["manifest.json"] = manifest
        files["signature"] = self.signer.sign_manifest(manifest)

        pkpass_bytes = self._create_pkpass_archive(files)
        logger.info(
            "pass_generated",
            serial_number=str(fields["serialNumber"]),
            pass_type=fields["passType"],
            size=len(pkpass_bytes),
        )
        return pkpass_bytes

    @staticmethod
    def validate_fields(fields: t.Mapping[str, t.Any]) -> None:
        for name in REQUIRED_FIELDS:
            if fields.get(name) is None:
                raise PassFieldsValidationError(f"{name} is required", field=name)

    def _generate_pass_json(self, fields: t.Mapping[str, t.Any]) -> bytes:
        pass_json: dict[str, t.Any] = {
            "description": fields["description"],
            "formatVersion": FORMAT_VERSION,
            "organizationName": self.config.organization_name,
            "passTypeIdentifier": self.config.pass_type_identifier,
            "serialNumber": str(fields["serialNumber"]),
            "teamIdentifier": self.config.team_identifier,
        }
        if self.config.logo_text:
            pass_json["logoText"] = self.config.logo_text
        pass_json[str(fields["passType"])] = fields["passValue"]
        pass_json.update({key: fields[key] for key in OPTIONAL_FIELDS if key in fields})
        return json.dumps(pass_json, indent=2).encode("utf-8")

    def _download_image(self, url: str) -> bytes:
        try:
            response = self.http_client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("pass_image_download_failed", url=url, error=str(e))
            raise ApplePassGeneratorError(f"Failed to download pass image {url}: {e}")
        return response.content

    def _create_pkpass_archive(self, files: dict[str, bytes]) -> bytes:
        """Create the .pkpass ZIP archive.

        Args:
            files: Dictionary mapping filename to content.

        Returns:
            ZIP archive as bytes.
        """
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for filename, content in files.items():
                zf.writestr(filename, content)
        return buffer.getvalue()
