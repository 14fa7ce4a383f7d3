"""Pydantic schemas for wallet pass API endpoints."""

import typing as t

from ninja import Schema
from pydantic import ConfigDict, Field

from wallet.google.kinds import PassKind


class CreateClassPayload(Schema):
    """Payload for creating a Google Wallet pass class."""

    classSuffix: str = Field(..., min_length=1, description="Developer-defined suffix of the class id")
    classFields: dict[str, t.Any] = Field(..., description="Class fields in the Google Wallet API shape")
    classType: str = Field(PassKind.EVENT_TICKET.value, description="Lowercase pass kind, e.g. eventticket")


class CreateTicketPayload(Schema):
    """Payload for creating a Google Wallet pass object."""

    classSuffix: str = Field(..., min_length=1)
    objectSuffix: str = Field(..., min_length=1, description="Developer-defined suffix of the object id")
    ticketFields: dict[str, t.Any] | None = Field(None, description="Object fields, normalized before submission")


class CreateTicketResponse(Schema):
    passObjectId: str


class PassObjectSchema(Schema):
    """A Google Wallet pass object as stored by the backend."""

    id: str
    classId: str
    kind: PassKind
    state: str | None = None
    payload: dict[str, t.Any] = Field(default_factory=dict, description="The raw backend resource")


class PKPassPayload(Schema):
    """Flat field bag for an Apple Wallet pass.

    The required fields are checked by the generator, so a missing one is
    reported like any other pass field error. Unknown keys are accepted and ignored.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    description: str | None = None
    serialNumber: str | None = None
    passType: str | None = Field(None, description="Pass style key, e.g. eventTicket or boardingPass")
    passValue: dict[str, t.Any] | None = Field(None, description="Style fields: headerFields, primaryFields, ...")
    relevantDate: str | None = None
    barcodes: list[dict[str, t.Any]] | dict[str, t.Any] | None = None
    backgroundColor: str | None = None
    foregroundColor: str | None = None
    labelColor: str | None = None
