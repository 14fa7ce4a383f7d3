"""Normalization of caller-supplied pass object fields.

Callers describe a pass object as a plain JSON tree using the field names of
the Google Wallet API, but with dates as day strings and without the nested
wrapper types the API expects. ``FieldNormalizer`` rewrites that tree into
the provider shapes from ``wallet.google.types``. It never mutates its input
and never rejects unknown keys.
"""

import typing as t

import structlog

from wallet.exceptions import PassFieldsValidationError
from wallet.google.formatting import ZERO_INTERVAL, DateIntervalFormatter
from wallet.google.types import (
    Barcode,
    DateTime,
    Image,
    ImageModuleData,
    ImageUri,
    InfoModuleData,
    LabelValue,
    LabelValueRow,
    LinksModuleData,
    LocalizedString,
    MerchantLocation,
    TextModuleData,
    Uri,
    build_model,
)

logger = structlog.get_logger(__name__)

DATE_KEYS = frozenset({"start", "end"})
VALID_TIME_INTERVAL_END = "validTimeInterval.end"

Fields = dict[str, t.Any]


def _as_list(value: t.Any, field: str) -> list[t.Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise PassFieldsValidationError(f"{field} must be a list", field=field)
    return list(value)


class FieldNormalizer:
    """Rewrites raw pass object fields into Google Wallet request shapes."""

    def __init__(
        self,
        grace_interval: str = ZERO_INTERVAL,
        formatter: DateIntervalFormatter | None = None,
        exempt_paths: t.Iterable[str] = (VALID_TIME_INTERVAL_END,),
    ) -> None:
        """Initialize the normalizer.

        Args:
            grace_interval: ISO 8601 duration added to ``validTimeInterval.end``.
            formatter: Date formatter to use. A default formatter is created if omitted.
            exempt_paths: Dotted paths the generic date sweep leaves alone.
        """
        self.grace_interval = grace_interval
        self.formatter = formatter or DateIntervalFormatter()
        self.exempt_paths = frozenset(exempt_paths)

    def normalize(self, raw_fields: t.Mapping[str, t.Any]) -> Fields:
        """Return a new field tree with every known sub-structure converted.

        Args:
            raw_fields: The caller-supplied field tree.

        Returns:
            A new tree; ``raw_fields`` is left untouched.

        Raises:
            InvalidDateError: If a date string cannot be parsed.
            PassFieldsValidationError: If a known sub-structure has the wrong shape.
        """
        fields = self._normalize_valid_time_interval(raw_fields)
        fields = self._replace_dates(fields, path="")
        fields = self._normalize_barcode(fields)
        fields = self._normalize_info_module(fields)
        fields = self._normalize_image_modules(fields)
        fields = self._normalize_text_modules(fields)
        fields = self._normalize_links_module(fields)
        fields = self._normalize_merchant_locations(fields)
        return fields

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def _date(self, value: str, grace_interval: str = ZERO_INTERVAL) -> DateTime:
        return DateTime(date=self.formatter.format(value, grace_interval=grace_interval))

    def _normalize_valid_time_interval(self, raw_fields: t.Mapping[str, t.Any]) -> Fields:
        fields = dict(raw_fields)
        interval = fields.get("validTimeInterval")
        if isinstance(interval, t.Mapping) and isinstance(interval.get("end"), str):
            fields["validTimeInterval"] = {
                **interval,
                "end": self._date(interval["end"], grace_interval=self.grace_interval),
            }
        return fields

    def _replace_dates(self, value: t.Any, path: str) -> t.Any:
        """Walk the tree, converting ``start``/``end`` strings outside the exempt paths."""
        if isinstance(value, t.Mapping):
            replaced = {}
            for key, item in value.items():
                current = f"{path}.{key}" if path else str(key)
                if key in DATE_KEYS and isinstance(item, str) and current not in self.exempt_paths:
                    replaced[key] = self._date(item)
                else:
                    replaced[key] = self._replace_dates(item, current)
            return replaced
        if isinstance(value, list):
            return [self._replace_dates(item, f"{path}.{index}") for index, item in enumerate(value)]
        return value

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def _normalize_barcode(self, fields: Fields) -> Fields:
        if fields.get("barcode") is not None:
            fields["barcode"] = build_model(Barcode, fields["barcode"], "barcode")
        return fields

    def _normalize_info_module(self, fields: Fields) -> Fields:
        info = fields.get("infoModuleData")
        if info is None:
            return fields
        if not isinstance(info, t.Mapping):
            raise PassFieldsValidationError("infoModuleData must be an object", field="infoModuleData")

        rows = []
        for index, row in enumerate(_as_list(info.get("labelValueRows"), "infoModuleData.labelValueRows")):
            row_path = f"infoModuleData.labelValueRows.{index}"
            columns = _as_list(row.get("columns") if isinstance(row, t.Mapping) else None, f"{row_path}.columns")
            rows.append(
                LabelValueRow(
                    columns=[build_model(LabelValue, column, f"{row_path}.columns") for column in columns],
                )
            )

        extra = {key: item for key, item in info.items() if key != "labelValueRows"}
        fields["infoModuleData"] = InfoModuleData(labelValueRows=rows, **extra)
        return fields

    def _normalize_image_modules(self, fields: Fields) -> Fields:
        if fields.get("imageModulesData") is None:
            return fields
        modules = _as_list(fields["imageModulesData"], "imageModulesData")
        fields["imageModulesData"] = [self._build_image_module(module, index) for index, module in enumerate(modules)]
        return fields

    def _build_image_module(self, module: t.Any, index: int) -> ImageModuleData:
        """Build one image module from a ``{slot: {sourceUri, contentDescription, id}}`` descriptor.

        Each descriptor is expected to carry a single slot; extra slots are ignored.
        """
        path = f"imageModulesData.{index}"
        if not module:
            return ImageModuleData()
        if not isinstance(module, t.Mapping):
            raise PassFieldsValidationError(f"{path} must be an object", field=path)
        if len(module) > 1:
            logger.warning("image_module_extra_slots_ignored", index=index, slots=list(module.keys()))

        slot, image_data = next(iter(module.items()))
        if not isinstance(image_data, t.Mapping) or image_data.get("sourceUri") is None:
            raise PassFieldsValidationError(f"{path}.{slot}.sourceUri is required", field=f"{path}.{slot}.sourceUri")

        description = image_data.get("contentDescription") or {}
        if not isinstance(description, t.Mapping):
            raise PassFieldsValidationError(
                f"{path}.{slot}.contentDescription must be an object", field=f"{path}.{slot}.contentDescription"
            )

        image = Image(
            sourceUri=build_model(ImageUri, image_data["sourceUri"], f"{path}.{slot}.sourceUri"),
            contentDescription=LocalizedString.from_locale_map(description) if description else None,
        )
        return ImageModuleData.model_validate({slot: image, "id": image_data.get("id")})

    def _normalize_text_modules(self, fields: Fields) -> Fields:
        if fields.get("textModulesData") is not None:
            fields["textModulesData"] = [
                build_model(TextModuleData, module, "textModulesData")
                for module in _as_list(fields["textModulesData"], "textModulesData")
            ]
        return fields

    def _normalize_links_module(self, fields: Fields) -> Fields:
        if fields.get("linksModuleData") is not None:
            links = _as_list(fields["linksModuleData"], "linksModuleData")
            uris = [build_model(Uri, link, "linksModuleData") for link in links]
            fields["linksModuleData"] = LinksModuleData(uris=uris)
        return fields

    def _normalize_merchant_locations(self, fields: Fields) -> Fields:
        if fields.get("merchantLocations") is not None:
            fields["merchantLocations"] = [
                build_model(MerchantLocation, location, "merchantLocations")
                for location in _as_list(fields["merchantLocations"], "merchantLocations")
            ]
        return fields
