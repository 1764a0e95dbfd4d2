import pytest

from shopsvc.token import Payload, TokenError
from shopsvc.user.domain import CreditCards, CreditCardsReply, UserUsecase
from shopsvc.user.repository import UserRepository
from shopsvc.user.service import (
    AddressMessage,
    DeleteAddressesMessage,
    GetAddressesRequest,
    UserService,
)
from shopsvc.user.store import AddressStore

USER = {"id": "user-1", "owner": "org", "name": "alice", "type": "normal-user"}


@pytest.fixture
def service():
    store = AddressStore(":memory:")
    store.create_schema()
    return UserService(UserUsecase(UserRepository(store)))


class CardRepo:
    def __init__(self):
        self.created = []

    def create_credit_card(self, req):
        self.created.append(req)
        return CreditCardsReply(message="OK", code=200)


def _msg(**overrides):
    fields = dict(
        owner="org",
        name="alice",
        street_address="1 Main St",
        city="Springfield",
        state="IL",
        country="US",
        zip_code="00000",
    )
    fields.update(overrides)
    return AddressMessage(**fields)


def test_create_and_get_addresses(service):
    created = service.create_addresses(USER, _msg())
    assert created.id > 0
    assert created.owner == "org"
    assert created.street_address == "1 Main St"
    reply = service.get_addresses(USER, GetAddressesRequest(owner="org", name="alice"))
    assert reply.addresses == [created]


def test_create_rejects_other_user(service):
    with pytest.raises(TokenError, match="invalid token"):
        service.create_addresses(USER, _msg(name="bob"))


def test_missing_token_rejected(service):
    with pytest.raises(TokenError, match="invalid token"):
        service.get_addresses(None, GetAddressesRequest(owner="org", name="alice"))


def test_payload_object_accepted(service):
    payload = Payload(id="user-1", name="alice", owner="org", type="normal-user")
    created = service.create_addresses(payload, _msg())
    assert created.name == "alice"


def test_update_addresses(service):
    created = service.create_addresses(USER, _msg())
    updated = service.update_addresses(USER, _msg(id=created.id, city="Shelbyville"))
    assert updated.id == created.id
    assert updated.city == "Shelbyville"


def test_update_rejects_other_owner(service):
    created = service.create_addresses(USER, _msg())
    with pytest.raises(TokenError):
        service.update_addresses(USER, _msg(id=created.id, owner="other"))


def test_delete_addresses(service):
    created = service.create_addresses(USER, _msg())
    reply = service.delete_addresses(
        USER, DeleteAddressesMessage(addresses_id=created.id, owner="org", name="alice")
    )
    assert (reply.message, reply.code, reply.id) == ("OK", 200, created.id)
    assert service.get_addresses(USER, GetAddressesRequest(owner="org", name="alice")).addresses == []


def test_delete_rejects_other_user(service):
    with pytest.raises(TokenError):
        service.delete_addresses(
            USER, DeleteAddressesMessage(addresses_id=1, owner="org", name="bob")
        )


def test_create_credit_card_uses_token_identity():
    repo = CardRepo()
    svc = UserService(UserUsecase(repo))
    reply = svc.create_credit_card(USER, CreditCards(owner="x", name="y", number="n"))
    assert reply.message == "OK"
    assert reply.code == 200
    assert repo.created == [CreditCards(owner="org", name="alice")]


def test_create_credit_card_requires_token():
    repo = CardRepo()
    svc = UserService(UserUsecase(repo))
    with pytest.raises(TokenError):
        svc.create_credit_card(None, CreditCards())
    assert repo.created == []


def test_other_card_endpoints_return_empty(service):
    assert service.update_credit_card(USER, CreditCards()).code == 0
    assert service.delete_credit_card(USER, None).message == ""
    assert service.get_credit_card(USER, None) == CreditCards()
    assert service.list_credit_cards(USER, None) == []