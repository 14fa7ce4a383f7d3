"""Pass object (ticket) lifecycle for Google Wallet."""

import typing as t

import structlog

from wallet.exceptions import PassNotFoundError
from wallet.google.classes import PassClassService
from wallet.google.kinds import PassKind
from wallet.google.models import STATE_ACTIVE, STATE_EXPIRED, PassObject
from wallet.google.normalizer import FieldNormalizer
from wallet.google.probing import OBJECT_MISS_REASONS, probe
from wallet.google.types import dump_fields
from wallet.protocols import WalletObjectsBackend

logger = structlog.get_logger(__name__)


class PassObjectService:
    """Creates, fetches and expires pass objects."""

    def __init__(
        self,
        backend: WalletObjectsBackend,
        issuer_id: str,
        class_service: PassClassService | None = None,
        normalizer: FieldNormalizer | None = None,
    ) -> None:
        self._backend = backend
        self.issuer_id = issuer_id
        self.class_service = class_service or PassClassService(backend, issuer_id)
        self.normalizer = normalizer or FieldNormalizer()

    def object_id(self, object_suffix: str) -> str:
        return f"{self.issuer_id}.{object_suffix}"

    def ticket_exists(self, object_suffix: str) -> bool:
        """Check whether any supported object kind holds the suffix.

        Raises:
            WalletBackendError: If the backend fails for a reason other than a miss.
        """
        return self._probe(object_suffix) is not None

    def create_ticket(
        self,
        class_suffix: str,
        object_suffix: str,
        raw_fields: t.Mapping[str, t.Any] | None = None,
    ) -> str:
        """Create a pass object, or return the id of the existing one.

        Args:
            class_suffix: Suffix of the class the object belongs to.
            object_suffix: Developer-defined unique id for this pass object.
            raw_fields: Object fields as sent by the caller; normalized before submission.

        Returns:
            The object id assigned by the backend, or the existing id.

        Raises:
            PassNotFoundError: If the class cannot be resolved.
            InvalidDateError: If a date in ``raw_fields`` cannot be parsed.
            PassFieldsValidationError: If a known sub-structure of ``raw_fields`` is malformed.
            WalletBackendError: If the backend rejects the request.
        """
        object_id = self.object_id(object_suffix)
        if self.ticket_exists(object_suffix):
            logger.debug("pass_object_already_exists", object_id=object_id)
            return object_id

        pass_class = self.class_service.resolve_class(class_suffix)
        body: dict[str, t.Any] = {
            "id": object_id,
            "classId": pass_class.id,
            "state": STATE_ACTIVE,
        }
        if raw_fields is not None:
            body.update(self.normalizer.normalize(raw_fields))

        response = self._backend.insert(pass_class.kind.object_resource, dump_fields(body))
        created_id: str = response.get("id", object_id)
        logger.info(
            "pass_object_created",
            object_id=created_id,
            class_id=pass_class.id,
            kind=pass_class.kind.value,
        )
        return created_id

    def get_ticket(self, object_suffix: str) -> PassObject | str:
        """Fetch a pass object.

        Returns:
            The object, or its bare id when no supported kind holds it.

        Raises:
            WalletBackendError: If the backend fails for a reason other than a miss.
        """
        found = self._probe(object_suffix)
        if found is None:
            logger.info("pass_object_not_found", object_id=self.object_id(object_suffix))
            return self.object_id(object_suffix)
        kind, payload = found
        return PassObject.from_payload(kind, payload)

    def resolve_ticket(self, object_suffix: str) -> PassObject:
        """Fetch a pass object, failing if it does not exist.

        Raises:
            PassNotFoundError: If no supported object kind holds the suffix.
            WalletBackendError: If the backend fails for a reason other than a miss.
        """
        found = self._probe(object_suffix)
        if found is None:
            raise PassNotFoundError(self.object_id(object_suffix))
        kind, payload = found
        return PassObject.from_payload(kind, payload)

    def expire_ticket(self, object_suffix: str) -> bool:
        """Set a pass object's state to expired.

        The valid time interval is left as is; the backend may hide passes whose
        interval has ended on its own schedule.

        Raises:
            PassNotFoundError: If the object does not exist.
            WalletBackendError: If the backend rejects the request.
        """
        pass_object = self.resolve_ticket(object_suffix)
        self._backend.patch(pass_object.kind.object_resource, pass_object.id, {"state": STATE_EXPIRED})
        logger.info("pass_object_expired", object_id=pass_object.id, kind=pass_object.kind.value)
        return True

    def _probe(self, object_suffix: str) -> tuple[PassKind, dict[str, t.Any]] | None:
        return probe(
            self._backend,
            self.object_id(object_suffix),
            resource_for=lambda kind: kind.object_resource,
            miss_reasons=OBJECT_MISS_REASONS,
        )
