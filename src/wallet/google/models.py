"""Domain representations of Google Wallet classes and objects.

These wrap the backend's JSON resources together with the kind that was
resolved for them, so callers never need to inspect the payload to find out
which resource collection a class or object lives in.
"""

import typing as t
from dataclasses import dataclass, field

from wallet.google.kinds import PassKind

STATE_ACTIVE = "ACTIVE"
STATE_EXPIRED = "EXPIRED"
REVIEW_STATUS_UNDER_REVIEW = "UNDER_REVIEW"


@dataclass(frozen=True)
class PassClass:
    """A pass class: the template shared by a family of passes."""

    id: str
    kind: PassKind
    review_status: str | None = None
    payload: dict[str, t.Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, kind: PassKind, payload: dict[str, t.Any]) -> "PassClass":
        return cls(
            id=payload["id"],
            kind=kind,
            review_status=payload.get("reviewStatus"),
            payload=payload,
        )


@dataclass(frozen=True)
class PassObject:
    """One issued pass, bound to a single class of the same kind."""

    id: str
    class_id: str
    kind: PassKind
    state: str | None = None
    payload: dict[str, t.Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, kind: PassKind, payload: dict[str, t.Any]) -> "PassObject":
        return cls(
            id=payload["id"],
            class_id=payload.get("classId", ""),
            kind=kind,
            state=payload.get("state"),
            payload=payload,
        )

    @property
    def is_expired(self) -> bool:
        return self.state == STATE_EXPIRED
