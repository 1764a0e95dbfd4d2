"""User persistence: profiles through the auth service, addresses through SQL."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Protocol

from .domain import (
    Address,
    Addresses,
    DeleteAddressesReply,
    DeleteAddressesRequest,
    GetProfileReply,
    GetProfileRequest,
    Request,
    UserProfile,
)
from .store import (
    AddressQueries,
    AddressRow,
    CreateAddressParams,
    NoRowsError,
    UpdateAddressParams,
)

_BEARER = "Bearer "


class ProfileError(Exception):
    """Raised when a profile cannot be looked up from the request."""


class AuthClient(Protocol):
    """The part of the auth service the user repository relies on."""

    def get_user_info(self, authorization: str) -> Any:
        """Return the user's info: owner, type, name, id, avatar and email."""
        ...


def _address(row: AddressRow) -> Address:
    return Address(
        id=row.id,
        owner=row.owner,
        name=row.name,
        street_address=row.street_address,
        city=row.city,
        state=row.state,
        country=row.country,
        zip_code=row.zip_code,
    )


class UserRepository:
    """Stores user addresses and looks up profiles through the auth service."""

    def __init__(
        self,
        queries: AddressQueries,
        auth_client: AuthClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.queries = queries
        self.auth_client = auth_client
        self.log = logger or logging.getLogger(__name__)

    def get_profile(self, req: GetProfileRequest) -> GetProfileReply:
        """Look up the profile of the bearer of the request's Authorization header."""
        header = req.authorization
        if not header:
            raise ProfileError(f"authorization: ({header}) header is empty")
        parts = header.split(_BEARER)
        if len(parts) < 2:
            raise ProfileError(f"token is not valid Bearer token : {header}")
        if self.auth_client is None:
            raise ProfileError("auth service client is not configured")
        info = self.auth_client.get_user_info(parts[1])
        return GetProfileReply(
            state="ok",
            data=UserProfile(
                owner=info.owner,
                type=info.type,
                name=info.name,
                id=info.id,
                avatar=info.avatar,
                email=info.email,
            ),
        )

    def create_address(self, req: Address) -> Address:
        """Store a new address for its owner and return it with its id."""
        row = self.queries.create_address(
            CreateAddressParams(
                owner=req.owner,
                name=req.name,
                street_address=req.street_address,
                city=req.city,
                state=req.state,
                country=req.country,
                zip_code=req.zip_code,
            )
        )
        return _address(row)

    def update_address(self, req: Address) -> Address:
        """Overwrite every field of an owner's address; NoRowsError if absent."""
        row = self.queries.update_address(
            UpdateAddressParams(
                id=req.id,
                owner=req.owner,
                name=req.name,
                street_address=req.street_address,
                city=req.city,
                state=req.state,
                country=req.country,
                zip_code=req.zip_code,
            )
        )
        return _address(row)

    def delete_address(self, req: DeleteAddressesRequest) -> DeleteAddressesReply:
        """Delete an owner's address; NoRowsError if absent."""
        row = self.queries.delete_address(req.address_id, req.owner, req.name)
        return DeleteAddressesReply(message="OK", id=row.id, code=int(HTTPStatus.OK))

    def get_addresses(self, req: Request) -> Addresses:
        """All addresses of a user; an empty list when there are none."""
        try:
            rows = self.queries.get_addresses(req.owner, req.name)
        except NoRowsError:
            return Addresses(addresses=[])
        return Addresses(addresses=[_address(row) for row in rows])