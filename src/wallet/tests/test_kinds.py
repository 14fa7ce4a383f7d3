"""Tests for wallet/google/kinds.py and wallet/google/probing.py."""

import pytest

from wallet.exceptions import UnsupportedPassKindError, WalletBackendError
from wallet.google.kinds import PROBE_ORDER, PassKind
from wallet.google.probing import CLASS_MISS_REASONS, OBJECT_MISS_REASONS, probe
from wallet.tests.fakes import FakeWalletObjectsBackend


class TestPassKind:
    def test_probe_order(self) -> None:
        assert [kind.value for kind in PROBE_ORDER] == [
            "eventticket",
            "flight",
            "generic",
            "giftcard",
            "loyalty",
            "offer",
            "transit",
        ]

    def test_resource_names(self) -> None:
        assert PassKind.GIFT_CARD.class_resource == "giftcardclass"
        assert PassKind.GIFT_CARD.object_resource == "giftcardobject"

    def test_from_tag(self) -> None:
        assert PassKind.from_tag("loyalty") is PassKind.LOYALTY

    @pytest.mark.parametrize("tag", ["boardingpass", "EventTicket", ""])
    def test_from_unknown_tag_raises(self, tag: str) -> None:
        with pytest.raises(UnsupportedPassKindError):
            PassKind.from_tag(tag)


class TestProbe:
    """Tests for resource-kind probing."""

    def test_returns_first_kind_holding_the_id(self, backend: FakeWalletObjectsBackend) -> None:
        backend.add("offerclass", {"id": "issuer.promo"})

        found = probe(backend, "issuer.promo", lambda kind: kind.class_resource, CLASS_MISS_REASONS)

        assert found == (PassKind.OFFER, {"id": "issuer.promo"})
        assert [resource for resource, _ in backend.calls_to("get")] == [
            "eventticketclass",
            "flightclass",
            "genericclass",
            "giftcardclass",
            "loyaltyclass",
            "offerclass",
        ]

    def test_returns_none_when_every_kind_misses(self, backend: FakeWalletObjectsBackend) -> None:
        assert probe(backend, "issuer.none", lambda kind: kind.class_resource, CLASS_MISS_REASONS) is None
        assert len(backend.calls_to("get")) == len(PassKind)

    def test_other_reasons_propagate(self, backend: FakeWalletObjectsBackend) -> None:
        backend.fail("get", "flightclass", WalletBackendError("Forbidden", status_code=403, reason="permissionDenied"))

        with pytest.raises(WalletBackendError) as exc_info:
            probe(backend, "issuer.x", lambda kind: kind.class_resource, CLASS_MISS_REASONS)

        assert exc_info.value.reason == "permissionDenied"
        assert len(backend.calls_to("get")) == 2

    def test_missing_reason_propagates_for_classes(self, backend: FakeWalletObjectsBackend) -> None:
        backend.fail("get", "eventticketclass", WalletBackendError("Unknown"))

        with pytest.raises(WalletBackendError):
            probe(backend, "issuer.x", lambda kind: kind.class_resource, CLASS_MISS_REASONS)

    def test_missing_reason_is_a_miss_for_objects(self, backend: FakeWalletObjectsBackend) -> None:
        backend.fail("get", "eventticketobject", WalletBackendError("Unknown"))
        backend.add("transitobject", {"id": "issuer.ride"})

        found = probe(backend, "issuer.ride", lambda kind: kind.object_resource, OBJECT_MISS_REASONS)

        assert found is not None
        assert found[0] is PassKind.TRANSIT
