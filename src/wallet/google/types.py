"""Request shapes of the Google Wallet ``walletobjects`` API.

Only the fields the normalizer touches are declared; every model accepts
additional keys so caller-supplied attributes reach the backend unchanged.
See https://developers.google.com/wallet/reference/rest/v1
"""

import typing as t

from pydantic import BaseModel, ConfigDict, ValidationError

from wallet.exceptions import PassFieldsValidationError


class WalletModel(BaseModel):
    """Base for provider shapes: unknown keys pass through verbatim."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)


class DateTime(WalletModel):
    date: str


class TranslatedString(WalletModel):
    language: str | None = None
    value: str | None = None


class LocalizedString(WalletModel):
    defaultValue: TranslatedString | None = None
    translatedValues: list[TranslatedString] | None = None

    @classmethod
    def from_locale_map(cls, values: t.Mapping[str, t.Any]) -> "LocalizedString":
        """Build a localized string from either the API shape or a ``{locale: text}`` map.

        In a locale map the first entry becomes the default value.
        """
        if "defaultValue" in values or "translatedValues" in values:
            return cls.model_validate(values)
        translated = [TranslatedString(language=language, value=value) for language, value in values.items()]
        if not translated:
            return cls()
        return cls(defaultValue=translated[0], translatedValues=translated[1:] or None)


class Barcode(WalletModel):
    type: str | None = None
    value: str | None = None
    alternateText: str | None = None


class LabelValue(WalletModel):
    label: str | None = None
    value: str | None = None


class LabelValueRow(WalletModel):
    columns: list[LabelValue] = []


class InfoModuleData(WalletModel):
    labelValueRows: list[LabelValueRow] = []


class ImageUri(WalletModel):
    uri: str | None = None


class Image(WalletModel):
    sourceUri: ImageUri | None = None
    contentDescription: LocalizedString | None = None


class ImageModuleData(WalletModel):
    mainImage: Image | None = None
    id: str | None = None


class TextModuleData(WalletModel):
    header: str | None = None
    body: str | None = None
    id: str | None = None


class Uri(WalletModel):
    uri: str | None = None
    description: str | None = None
    id: str | None = None


class LinksModuleData(WalletModel):
    uris: list[Uri] = []


class MerchantLocation(WalletModel):
    latitude: float | None = None
    longitude: float | None = None


def dump_fields(value: t.Any) -> t.Any:
    """Serialize a normalized field tree into a JSON-ready request body.

    Provider models are dumped without unset optional fields; mappings and
    sequences are walked recursively; scalars are returned as they are.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, t.Mapping):
        return {key: dump_fields(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [dump_fields(item) for item in value]
    return value


M = t.TypeVar("M", bound=WalletModel)


def build_model(model: type[M], data: t.Any, field: str) -> M:
    """Validate ``data`` into ``model``, reporting failures against ``field``.

    Raises:
        PassFieldsValidationError: If ``data`` does not fit ``model``.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PassFieldsValidationError(f"{field} is malformed: {e.errors()[0]['msg']}", field=field)
