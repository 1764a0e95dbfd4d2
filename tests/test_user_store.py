import pytest

from shopsvc.user.store import (
    AddressQueries,
    AddressRow,
    AddressStore,
    CreateAddressParams,
    NoRowsError,
    UpdateAddressParams,
)

OWNER = "built-in"
NAME = "alice"


@pytest.fixture
def queries():
    q = AddressQueries()
    q.create_schema()
    return q


@pytest.fixture
def store():
    s = AddressStore()
    s.create_schema()
    return s


def _params(owner=OWNER, name=NAME, city="Springfield"):
    return CreateAddressParams(
        owner=owner,
        name=name,
        street_address="1 Main St",
        city=city,
        state="State",
        country="Country",
        zip_code="00000",
    )


def test_create_returns_row(queries):
    row = queries.create_address(_params())
    assert row.id > 0
    assert row.owner == OWNER
    assert row.name == NAME
    assert row.street_address == "1 Main St"
    assert row.city == "Springfield"
    assert row.zip_code == "00000"


def test_get_addresses_returns_created(queries):
    first = queries.create_address(_params(city="Springfield"))
    second = queries.create_address(_params(city="Shelbyville"))
    assert queries.get_addresses(OWNER, NAME) == [first, second]


def test_get_addresses_filters_by_user(queries):
    queries.create_address(_params())
    other = queries.create_address(_params(name="bob"))
    assert queries.get_addresses(OWNER, "bob") == [other]
    assert queries.get_addresses("nobody", NAME) == []


def test_update_keeps_unset_fields(queries):
    row = queries.create_address(_params())
    updated = queries.update_address(
        UpdateAddressParams(id=row.id, owner=OWNER, name=NAME, city="Capital City")
    )
    assert updated.city == "Capital City"
    assert updated.street_address == row.street_address
    assert updated.zip_code == row.zip_code
    assert queries.get_addresses(OWNER, NAME) == [updated]


def test_update_missing_raises(queries):
    with pytest.raises(NoRowsError):
        queries.update_address(UpdateAddressParams(id=99, owner=OWNER, name=NAME, city="x"))


def test_update_other_owner_raises(queries):
    row = queries.create_address(_params())
    with pytest.raises(NoRowsError):
        queries.update_address(UpdateAddressParams(id=row.id, owner=OWNER, name="bob", city="x"))
    assert queries.get_addresses(OWNER, NAME)[0].city == "Springfield"


def test_delete_returns_row_and_removes(queries):
    row = queries.create_address(_params())
    deleted = queries.delete_address(row.id, OWNER, NAME)
    assert deleted == row
    assert queries.get_addresses(OWNER, NAME) == []


def test_delete_missing_raises(queries):
    row = queries.create_address(_params())
    with pytest.raises(NoRowsError):
        queries.delete_address(row.id, OWNER, "bob")
    assert queries.get_addresses(OWNER, NAME) == [row]


def test_exec_tx_commits(store):
    created = store.exec_tx(lambda q: q.create_address(_params()))
    assert isinstance(created, AddressRow)
    assert store.get_addresses(OWNER, NAME) == [created]


def test_exec_tx_rolls_back_on_error(store):
    def work(q):
        q.create_address(_params())
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        store.exec_tx(work)
    assert store.get_addresses(OWNER, NAME) == []


def test_exec_tx_keeps_earlier_rows(store):
    kept = store.create_address(_params(city="Springfield"))

    def work(q):
        q.delete_address(kept.id, OWNER, NAME)
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError, match="abort"):
        store.exec_tx(work)
    assert store.get_addresses(OWNER, NAME) == [kept]