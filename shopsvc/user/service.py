"""RPC-facing user service: address and credit-card endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..token import Payload, TokenError, extract_payload
from .domain import (
    Address,
    CreditCards,
    DeleteAddressesRequest,
    Request,
    UserUsecase,
)


@dataclass
class AddressMessage:
    id: int = 0
    owner: str = ""
    name: str = ""
    street_address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""


@dataclass
class DeleteAddressesMessage:
    addresses_id: int = 0
    owner: str = ""
    name: str = ""


@dataclass
class DeleteAddressesReplyMessage:
    message: str = ""
    id: int = 0
    code: int = 0


@dataclass
class GetAddressesRequest:
    owner: str = ""
    name: str = ""


@dataclass
class GetAddressesReply:
    addresses: list[AddressMessage] = field(default_factory=list)


@dataclass
class CardsReply:
    message: str = ""
    code: int = 0


def _message(address: Address) -> AddressMessage:
    return AddressMessage(
        id=address.id,
        owner=address.owner,
        name=address.name,
        street_address=address.street_address,
        city=address.city,
        state=address.state,
        country=address.country,
        zip_code=address.zip_code,
    )


def _authorize(user: object, owner: str, name: str) -> Payload:
    """The token's identity, which must be the user the request names."""
    payload = extract_payload(user)
    if owner != payload.owner or name != payload.name:
        raise TokenError("invalid token")
    return payload


class UserService:
    """User operations exposed over RPC; ``user`` is the verified token's claims."""

    def __init__(self, usecase: UserUsecase) -> None:
        self.uc = usecase

    def create_addresses(self, user: object, req: AddressMessage) -> AddressMessage:
        payload = _authorize(user, req.owner, req.name)
        address = self.uc.create_address(
            Address(
                owner=payload.owner,
                name=payload.name,
                street_address=req.street_address,
                city=req.city,
                state=req.state,
                country=req.country,
                zip_code=req.zip_code,
            )
        )
        return _message(address)

    def update_addresses(self, user: object, req: AddressMessage) -> AddressMessage:
        payload = _authorize(user, req.owner, req.name)
        address = self.uc.update_address(
            Address(
                id=req.id,
                owner=payload.owner,
                name=payload.name,
                street_address=req.street_address,
                city=req.city,
                state=req.state,
                country=req.country,
                zip_code=req.zip_code,
            )
        )
        return _message(address)

    def delete_addresses(
        self, user: object, req: DeleteAddressesMessage
    ) -> DeleteAddressesReplyMessage:
        payload = _authorize(user, req.owner, req.name)
        reply = self.uc.delete_address(
            DeleteAddressesRequest(
                address_id=int(req.addresses_id),
                owner=payload.owner,
                name=payload.name,
            )
        )
        return DeleteAddressesReplyMessage(message=reply.message, id=reply.id, code=reply.code)

    def get_addresses(self, user: object, req: GetAddressesRequest) -> GetAddressesReply:
        payload = _authorize(user, req.owner, req.name)
        found = self.uc.get_addresses(Request(owner=payload.owner, name=payload.name))
        return GetAddressesReply(addresses=[_message(a) for a in found.addresses])

    def create_credit_card(self, user: object, req: CreditCards) -> CardsReply:
        payload = extract_payload(user)
        self.uc.create_credit_card(CreditCards(owner=payload.owner, name=payload.name))
        return CardsReply(message="OK", code=200)

    def update_credit_card(self, user: object, req: CreditCards) -> CardsReply:
        return CardsReply()

    def delete_credit_card(self, user: object, req: object) -> CardsReply:
        return CardsReply()

    def get_credit_card(self, user: object, req: object) -> CreditCards:
        return CreditCards()

    def list_credit_cards(self, user: object, req: object) -> list[CreditCards]:
        cards: list[CreditCards] = list()
        return cards