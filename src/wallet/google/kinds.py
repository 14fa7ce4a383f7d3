"""Supported Google Wallet pass kinds.

Each kind maps to one class resource and one object resource of the
``walletobjects`` API. The member order is the order in which resources are
probed when the kind of a suffix is unknown.
"""

from enum import StrEnum

from wallet.exceptions import UnsupportedPassKindError


class PassKind(StrEnum):
    EVENT_TICKET = "eventticket"
    FLIGHT = "flight"
    GENERIC = "generic"
    GIFT_CARD = "giftcard"
    LOYALTY = "loyalty"
    OFFER = "offer"
    TRANSIT = "transit"

    @property
    def class_resource(self) -> str:
        """Name of the class resource, e.g. ``eventticketclass``."""
        return f"{self.value}class"

    @property
    def object_resource(self) -> str:
        """Name of the object resource, e.g. ``eventticketobject``."""
        return f"{self.value}object"

    @classmethod
    def from_tag(cls, tag: str) -> "PassKind":
        """Look up a kind by its tag.

        Raises:
            UnsupportedPassKindError: If the tag is not one of the supported kinds.
        """
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedPassKindError(tag)


PROBE_ORDER: tuple[PassKind, ...] = tuple(PassKind)
