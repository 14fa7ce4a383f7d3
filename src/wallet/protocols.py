"""Protocol definitions for the external wallet collaborators.

The Google Wallet services talk to the pass-issuing backend only through
``WalletObjectsBackend``, and the REST layer issues Apple passes only through
``PassFileIssuer``, so both can be replaced by in-memory fakes in tests.
"""

import typing as t
from typing import Protocol


class WalletObjectsBackend(Protocol):
    """Class/object CRUD of the Google Wallet API, keyed by resource name.

    Resource names are the lowercase collection names of the ``walletobjects``
    API (``eventticketclass``, ``genericobject``, ...). Every method raises
    ``WalletBackendError`` carrying the backend's reason code on failure.
    """

    def get(self, resource: str, resource_id: str) -> dict[str, t.Any]:
        """Fetch a class or object by its full id (``{issuerId}.{suffix}``).

        Args:
            resource: The resource collection to query.
            resource_id: The full resource id.

        Returns:
            The resource as returned by the backend.
        """
        ...

    def insert(self, resource: str, body: dict[str, t.Any]) -> dict[str, t.Any]:
        """Create a class or object.

        Args:
            resource: The resource collection to insert into.
            body: The JSON request body, including its ``id``.

        Returns:
            The created resource as returned by the backend.
        """
        ...

    def patch(self, resource: str, resource_id: str, body: dict[str, t.Any]) -> dict[str, t.Any]:
        """Partially update a class or object.

        Args:
            resource: The resource collection holding the resource.
            resource_id: The full resource id.
            body: The fields to update.

        Returns:
            The updated resource as returned by the backend.
        """
        ...


class PassFileIssuer(Protocol):
    """Produces a signed pass file from a flat field bag."""

    def issue_pass(self, fields: t.Mapping[str, t.Any]) -> bytes:
        """Generate a pass file.

        Args:
            fields: The pass fields supplied by the caller.

        Returns:
            The pass file as bytes (e.g., .pkpass for Apple).
        """
        ...

    def get_pass_content_type(self) -> str:
        """Get the MIME content type for this pass format."""
        ...

    def get_pass_file_extension(self) -> str:
        """Get the file extension for this pass format, without dot."""
        ...
