"""Resource-kind probing.

A Google Wallet id does not encode the kind of class or object it refers
to. To find it, the resource collections of every supported kind are queried
in priority order until one of them returns the resource.
"""

import typing as t

import structlog

from wallet.exceptions import WalletBackendError
from wallet.google.kinds import PROBE_ORDER, PassKind
from wallet.protocols import WalletObjectsBackend

logger = structlog.get_logger(__name__)

REASON_INVALID_RESOURCE = "invalidResource"
REASON_RESOURCE_NOT_FOUND = "resourceNotFound"

# Reasons meaning "not in this collection": probing moves on to the next kind.
CLASS_MISS_REASONS = frozenset({REASON_INVALID_RESOURCE, REASON_RESOURCE_NOT_FOUND})
OBJECT_MISS_REASONS = frozenset({None, REASON_INVALID_RESOURCE, REASON_RESOURCE_NOT_FOUND})


def probe(
    backend: WalletObjectsBackend,
    resource_id: str,
    resource_for: t.Callable[[PassKind], str],
    miss_reasons: frozenset[str | None],
    kinds: t.Iterable[PassKind] = PROBE_ORDER,
) -> tuple[PassKind, dict[str, t.Any]] | None:
    """Find the kind whose collection holds ``resource_id``.

    Args:
        backend: The backend to query.
        resource_id: The full resource id.
        resource_for: Maps a kind to the collection to query (class or object resource).
        miss_reasons: Backend reason codes treated as "not here, try the next kind".
        kinds: Kinds to try, in order.

    Returns:
        The first ``(kind, resource)`` found, or None if every kind missed.

    Raises:
        WalletBackendError: For any backend error whose reason is not a miss.
    """
    for kind in kinds:
        resource = resource_for(kind)
        try:
            payload = backend.get(resource, resource_id)
        except WalletBackendError as e:
            if e.reason in miss_reasons:
                logger.debug("probe_miss", resource=resource, resource_id=resource_id, reason=e.reason)
                continue
            raise
        return kind, payload
    return None
