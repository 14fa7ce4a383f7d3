"""Pass class lifecycle for Google Wallet."""

import typing as t

import structlog

from wallet.exceptions import PassClassAlreadyExistsError, PassFieldsValidationError, PassNotFoundError
from wallet.google.kinds import PassKind
from wallet.google.models import REVIEW_STATUS_UNDER_REVIEW, PassClass
from wallet.google.probing import CLASS_MISS_REASONS, probe
from wallet.google.types import LocalizedString, build_model, dump_fields
from wallet.protocols import WalletObjectsBackend

logger = structlog.get_logger(__name__)

REQUIRED_CLASS_FIELDS = (
    "eventName.defaultValue.language",
    "eventName.defaultValue.value",
    "issuerName",
)


def has_nested_key(data: t.Mapping[str, t.Any], path: str) -> bool:
    """Check that every key of a dotted path exists and is not None."""
    current: t.Any = data
    for key in path.split("."):
        if not isinstance(current, t.Mapping) or current.get(key) is None:
            return False
        current = current[key]
    return True


class PassClassService:
    """Creates pass classes and resolves which kind a class suffix belongs to."""

    def __init__(self, backend: WalletObjectsBackend, issuer_id: str) -> None:
        self._backend = backend
        self.issuer_id = issuer_id

    def class_id(self, class_suffix: str) -> str:
        return f"{self.issuer_id}.{class_suffix}"

    def class_exists(self, class_suffix: str) -> bool:
        """Check whether any supported class kind holds the suffix.

        Raises:
            WalletBackendError: If the backend fails for a reason other than a miss.
        """
        return self._probe(class_suffix) is not None

    def resolve_class(self, class_suffix: str) -> PassClass:
        """Fetch a class, whatever its kind.

        Raises:
            PassNotFoundError: If no supported class kind holds the suffix.
            WalletBackendError: If the backend fails for a reason other than a miss.
        """
        found = self._probe(class_suffix)
        if found is None:
            class_id = self.class_id(class_suffix)
            raise PassNotFoundError(class_id, f"Class {class_id} not found in any supported class types")
        kind, payload = found
        return PassClass.from_payload(kind, payload)

    def create_class(
        self,
        class_suffix: str,
        fields: t.Mapping[str, t.Any],
        class_type: str = PassKind.EVENT_TICKET,
    ) -> bool:
        """Create a class.

        Args:
            class_suffix: Developer-defined unique id for this pass class.
            fields: The fields to set on the class, e.g.
                ``{"eventName": {"defaultValue": {"language": "en-US", "value": "My Event"}},
                "issuerName": "My Issuer"}``.
            class_type: The kind of class to create.

        Returns:
            True once the class has been inserted.

        Raises:
            UnsupportedPassKindError: If ``class_type`` is not a supported kind.
            PassFieldsValidationError: If a required field is missing.
            PassClassAlreadyExistsError: If a class with this suffix already exists.
            WalletBackendError: If the backend rejects the request.
        """
        kind = PassKind.from_tag(class_type)
        self.validate_class_fields(fields)

        class_id = self.class_id(class_suffix)
        if self.class_exists(class_suffix):
            raise PassClassAlreadyExistsError(class_id)

        class_fields: dict[str, t.Any] = {
            "eventId": class_id,
            "id": class_id,
            "reviewStatus": REVIEW_STATUS_UNDER_REVIEW,
        }
        for name, value in fields.items():
            if isinstance(value, t.Mapping) and value.get("defaultValue") is not None:
                value = build_model(LocalizedString, value, name)
            class_fields[name] = value

        self._backend.insert(kind.class_resource, dump_fields(class_fields))
        logger.info("pass_class_created", class_id=class_id, kind=kind.value)
        return True

    @staticmethod
    def validate_class_fields(fields: t.Mapping[str, t.Any]) -> None:
        """Check that the fields every class needs are present.

        Raises:
            PassFieldsValidationError: Naming the first missing field.
        """
        for path in REQUIRED_CLASS_FIELDS:
            if not has_nested_key(fields, path):
                raise PassFieldsValidationError(f"{path} must be set in classFields", field=path)

    def _probe(self, class_suffix: str) -> tuple[PassKind, dict[str, t.Any]] | None:
        return probe(
            self._backend,
            self.class_id(class_suffix),
            resource_for=lambda kind: kind.class_resource,
            miss_reasons=CLASS_MISS_REASONS,
        )
