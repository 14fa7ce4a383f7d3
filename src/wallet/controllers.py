"""Django Ninja controllers for wallet pass API endpoints.

This module provides two sets of endpoints:

1. Google Wallet (at /api/wallet/google/...)
   - Pass class creation and existence checks
   - Pass object (ticket) creation, retrieval and expiry

2. Apple Wallet (at /api/wallet/pkpass)
   - Signed .pkpass generation from a flat field bag

All endpoints require a bearer token from ``WALLET_API_TOKENS``. Errors raised
by the wallet services are mapped onto HTTP responses in
``api.exception_handlers``.
"""

from django.http import HttpResponse
from ninja_extra import api_controller, route
from ninja_extra.controllers.base import ControllerBase

from common.authentication import ApiTokenAuth
from common.schema import ErrorResponse
from wallet.google.models import PassObject
from wallet.schemas import (
    CreateClassPayload,
    CreateTicketPayload,
    CreateTicketResponse,
    PassObjectSchema,
    PKPassPayload,
)
from wallet.service import WalletService, get_wallet_service


class WalletControllerBase(ControllerBase):
    @property
    def service(self) -> WalletService:
        """Get wallet service instance."""
        return get_wallet_service()


@api_controller("/wallet/google", tags=["Google Wallet"], auth=ApiTokenAuth())
class GoogleWalletController(WalletControllerBase):
    """Google Wallet pass classes and objects."""

    @route.post(
        "/class",
        url_name="google_wallet_create_class",
        summary="Create a pass class",
        response={201: bool, 400: ErrorResponse, 409: ErrorResponse, 502: ErrorResponse},
    )
    def create_class(self, payload: CreateClassPayload) -> tuple[int, bool]:
        """Create a pass class of the given kind.

        Returns:
            201: The class was created
            400: Unsupported class type or missing required fields
            409: A class with this suffix already exists
        """
        created = self.service.create_class(payload.classSuffix, payload.classFields, payload.classType)
        return 201, created

    @route.get(
        "/{class_suffix}/class-exists",
        url_name="google_wallet_class_exists",
        summary="Check whether a pass class exists",
        response={200: bool, 502: ErrorResponse},
    )
    def class_exists(self, class_suffix: str) -> bool:
        return self.service.class_exists(class_suffix)

    @route.post(
        "/ticket",
        url_name="google_wallet_create_ticket",
        summary="Create a pass object",
        description="Create a pass object for an existing class. Creating an existing object returns its id.",
        response={201: CreateTicketResponse, 400: ErrorResponse, 404: ErrorResponse, 502: ErrorResponse},
    )
    def create_ticket(self, payload: CreateTicketPayload) -> tuple[int, CreateTicketResponse]:
        """Create a pass object.

        Returns:
            201: The id of the (new or existing) object
            400: Malformed ticket fields or dates
            404: The class does not exist
        """
        object_id = self.service.create_ticket(payload.classSuffix, payload.objectSuffix, payload.ticketFields)
        return 201, CreateTicketResponse(passObjectId=object_id)

    @route.get(
        "/ticket/{object_suffix}",
        url_name="google_wallet_get_ticket",
        summary="Fetch a pass object",
        description="Returns the object, or its bare id when no pass type holds it.",
        response={200: PassObjectSchema | str},
    )
    def get_ticket(self, object_suffix: str) -> PassObjectSchema | str:
        result = self.service.get_ticket(object_suffix)
        if isinstance(result, PassObject):
            return PassObjectSchema(
                id=result.id,
                classId=result.class_id,
                kind=result.kind,
                state=result.state,
                payload=result.payload,
            )
        return result

    @route.delete(
        "/ticket/{object_suffix}",
        url_name="google_wallet_expire_ticket",
        summary="Expire a pass object",
        response={200: bool, 404: ErrorResponse, 502: ErrorResponse},
    )
    def expire_ticket(self, object_suffix: str) -> bool:
        """Set the pass object's state to expired.

        Returns:
            200: The object was expired
            404: The object does not exist
        """
        return self.service.expire_ticket(object_suffix)


@api_controller("/wallet", tags=["Apple Wallet"], auth=ApiTokenAuth())
class PKPassController(WalletControllerBase):
    """Apple Wallet pass generation."""

    @route.post(
        "/pkpass",
        url_name="apple_wallet_pkpass",
        summary="Generate an Apple Wallet pass",
        description="Generate and download a signed .pkpass file from the posted pass fields.",
        response={200: None, 400: ErrorResponse, 503: ErrorResponse},
    )
    def issue_pkpass(self, payload: PKPassPayload) -> HttpResponse:
        """Generate a .pkpass file.

        Returns:
            200: The .pkpass file
            400: A required pass field is missing
            503: Apple Wallet not configured
        """
        fields = payload.model_dump(exclude_none=True)
        pkpass = self.service.issue_apple_pass(fields)
        issuer = self.service.apple_issuer

        response = HttpResponse(pkpass, content_type=issuer.get_pass_content_type())
        filename = f"{fields['serialNumber']}.{issuer.get_pass_file_extension()}"
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
