"""User domain types: profiles, addresses and credit cards, and the use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class GetProfileRequest:
    authorization: str = ""


@dataclass
class UserProfile:
    """The user fields a profile reply carries."""

    owner: str = ""
    type: str = ""
    name: str = ""
    id: str = ""
    avatar: str = ""
    email: str = ""


@dataclass
class GetProfileReply:
    state: str = ""
    data: UserProfile = field(default_factory=UserProfile)


@dataclass
class Request:
    owner: str = ""
    name: str = ""


@dataclass
class DeleteAddressesRequest:
    address_id: int = 0
    owner: str = ""
    name: str = ""


@dataclass
class Address:
    id: int = 0
    owner: str = ""
    name: str = ""
    street_address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""


@dataclass
class Addresses:
    addresses: list[Address] = field(default_factory=list)


@dataclass
class DeleteAddressesReply:
    message: str = ""
    id: int = 0
    code: int = 0


@dataclass
class CreditCards:
    id: int = 0
    owner: str = ""
    name: str = ""
    number: str = ""
    cvv: str = ""
    expiration_year: str = ""
    expiration_month: str = ""


@dataclass
class GetCreditCardsRequest:
    owner: str = ""
    name: str = ""
    number: str = ""


@dataclass
class CreditCardsRequest:
    owner: str = ""
    name: str = ""


@dataclass
class CreditCardsReply:
    message: str = ""
    code: int = 0


@dataclass
class DeleteCreditCardsRequest:
    owner: str = ""
    name: str = ""
    id: int = 0


class UserRepo(Protocol):
    """Persistence and lookups for user data."""

    def get_profile(self, req: GetProfileRequest) -> GetProfileReply: ...

    def create_address(self, req: Address) -> Address: ...

    def update_address(self, req: Address) -> Address: ...

    def delete_address(self, req: DeleteAddressesRequest) -> DeleteAddressesReply: ...

    def get_addresses(self, req: Request) -> Addresses: ...

    def create_credit_card(self, req: CreditCards) -> CreditCardsReply: ...

    def update_credit_card(self, req: CreditCards) -> CreditCardsReply: ...

    def delete_credit_card(self, req: DeleteCreditCardsRequest) -> CreditCardsReply: ...

    def get_credit_card(self, req: GetCreditCardsRequest) -> CreditCards: ...

    def search_credit_cards(self, req: GetCreditCardsRequest) -> list[CreditCards]: ...

    def list_credit_cards(self, req: CreditCardsRequest) -> list[CreditCards]: ...


class UserUsecase:
    """User operations, logged and delegated to a repository."""

    def __init__(self, repo: UserRepo, logger: logging.Logger | None = None) -> None:
        self.repo = repo
        self.log = logger or logging.getLogger(__name__)

    def get_profile(self, req: GetProfileRequest) -> GetProfileReply:
        self.log.info("GetProfile: %r", req)
        return self.repo.get_profile(req)

    def create_address(self, req: Address) -> Address:
        self.log.info("CreateAddress: %r", req)
        return self.repo.create_address(req)

    def update_address(self, req: Address) -> Address:
        self.log.info("UpdateAddress: %r", req)
        return self.repo.update_address(req)

    def delete_address(self, req: DeleteAddressesRequest) -> DeleteAddressesReply:
        self.log.info("DeleteAddress: %r", req)
        return self.repo.delete_address(req)

    def get_addresses(self, req: Request) -> Addresses:
        self.log.info("GetAddresses: %r", req)
        return self.repo.get_addresses(req)

    def create_credit_card(self, req: CreditCards) -> CreditCardsReply:
        self.log.info("CreateCreditCards: %r", req)
        return self.repo.create_credit_card(req)

    def update_credit_cards(self, req: CreditCards) -> CreditCardsReply:
        self.log.info("UpdateCreditCards: %r", req)
        return self.repo.update_credit_card(req)

    def delete_credit_cards(self, req: DeleteCreditCardsRequest) -> CreditCardsReply:
        self.log.info("DeleteCreditCards: %r", req)
        return self.repo.delete_credit_card(req)

    def get_credit_card(self, req: GetCreditCardsRequest) -> CreditCards:
        self.log.info("GetCreditCards: %r", req)
        return self.repo.get_credit_card(req)

    def search_credit_cards(self, req: GetCreditCardsRequest) -> list[CreditCards]:
        self.log.info("GetCreditCards: %r", req)
        return self.repo.search_credit_cards(req)

    def list_credit_cards(self, req: CreditCardsRequest) -> list[CreditCards]:
        self.log.info("ListCreditCards: %r", req)
        return self.repo.list_credit_cards(req)