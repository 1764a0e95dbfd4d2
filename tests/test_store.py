from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shopsvc.product.store import (
    CreateAuditParams,
    CreateProductParams,
    ImageParams,
    NoRowsError,
    ProductQueries,
    UpdateProductParams,
    UpdateProductStatusParams,
)


@pytest.fixture
def queries():
    q = ProductQueries(":memory:")
    q.create_schema()
    yield q
    q.conn.close()


def _make(queries, merchant_id=7, name="lamp", price="19.99", stock=5):
    return queries.create_product(
        CreateProductParams(
            name=name, price=price, merchant_id=merchant_id,
            description="desk lamp", stock=stock,
        )
    )


def test_create_and_get_round_trip(queries):
    created = _make(queries)
    fetched = queries.get_product(created.id, 7)
    assert fetched == created
    assert fetched.name == "lamp"
    assert fetched.price == Decimal("19.99")
    assert fetched.stock == 5
    assert fetched.description == "desk lamp"
    assert fetched.status == 0
    assert fetched.current_audit_id is None


def test_create_sets_equal_timestamps(queries):
    created = _make(queries)
    assert created.created_at == created.updated_at
    assert created.created_at.tzinfo is not None


def test_ids_are_distinct(queries):
    first = _make(queries)
    second = _make(queries, name="chair")
    assert first.id != second.id
    assert queries.get_product(second.id, 7).name == "chair"


def test_float_price_is_stored_exactly(queries):
    created = _make(queries, price=12.5)
    assert queries.get_product(created.id, 7).price == Decimal("12.5")


def test_invalid_price_raises(queries):
    with pytest.raises(ValueError):
        _make(queries, price="abc")


def test_missing_product_raises(queries):
    with pytest.raises(NoRowsError):
        queries.get_product(999, 7)


def test_wrong_merchant_raises(queries):
    created = _make(queries)
    with pytest.raises(NoRowsError):
        queries.get_product(created.id, 8)


def test_soft_delete_hides_product(queries):
    created = _make(queries)
    assert queries.soft_delete_product(created.id, 7) == 1
    with pytest.raises(NoRowsError):
        queries.get_product(created.id, 7)


def test_soft_delete_other_merchant_changes_nothing(queries):
    created = _make(queries)
    assert queries.soft_delete_product(created.id, 8) == 0
    assert queries.get_product(created.id, 7).id == created.id


def test_update_with_current_version(queries):
    created = _make(queries)
    changed = queries.update_product(
        UpdateProductParams(
            id=created.id, merchant_id=7, name="big lamp", price="29.50",
            updated_at=created.updated_at, description=None, stock=3, status=0,
        )
    )
    assert changed == 1
    fetched = queries.get_product(created.id, 7)
    assert fetched.name == "big lamp"
    assert fetched.price == Decimal("29.50")
    assert fetched.stock == 3
    assert fetched.description is None
    assert fetched.updated_at >= created.updated_at


def test_update_with_stale_version_is_ignored(queries):
    created = _make(queries)
    stale = datetime(2000, 1, 1, tzinfo=timezone.utc)
    changed = queries.update_product(
        UpdateProductParams(
            id=created.id, merchant_id=7, name="other", price="1",
            updated_at=stale,
        )
    )
    assert changed == 0
    assert queries.get_product(created.id, 7).name == "lamp"


def test_update_status_sets_audit(queries):
    created = _make(queries)
    audit = queries.create_audit_record(
        CreateAuditParams(merchant_id=7, product_id=created.id, old_status=0, new_status=1)
    )
    changed = queries.update_product_status(
        UpdateProductStatusParams(
            id=created.id, merchant_id=7, status=1, current_audit_id=audit.id
        )
    )
    assert changed == 1
    fetched = queries.get_product(created.id, 7)
    assert fetched.status == 1
    assert fetched.current_audit_id == audit.id


def test_audit_record_round_trip(queries):
    first = queries.create_audit_record(
        CreateAuditParams(
            merchant_id=7, product_id=3, old_status=1, new_status=3,
            reason="blurry photos", operator_id=42,
        )
    )
    second = queries.create_audit_record(
        CreateAuditParams(merchant_id=7, product_id=3, old_status=0, new_status=1)
    )
    assert first.reason == "blurry photos"
    assert first.operator_id == 42
    assert (first.old_status, first.new_status) == (1, 3)
    assert second.reason is None
    assert second.id > first.id


def test_bulk_images_ordered_with_unsorted_last(queries):
    created = _make(queries)
    count = queries.bulk_create_product_images(
        [
            ImageParams(7, created.id, "c.png", sort_order=None),
            ImageParams(7, created.id, "b.png", sort_order=2),
            ImageParams(7, created.id, "a.png", is_primary=True, sort_order=1),
            ImageParams(7, created.id + 100, "other.png", sort_order=0),
        ]
    )
    assert count == 4
    images = queries.get_product_images(7, created.id)
    assert [img.url for img in images] == ["a.png", "b.png", "c.png"]
    assert images[0].is_primary is True
    assert images[1].is_primary is False
    assert images[2].sort_order is None


def test_bulk_images_empty(queries):
    assert queries.bulk_create_product_images([]) == 0
    assert queries.get_product_images(7, 1) == []


def test_images_filtered_by_merchant(queries):
    queries.bulk_create_product_images([ImageParams(7, 1, "x.png", sort_order=1)])
    assert queries.get_product_images(8, 1) == []
    assert [img.url for img in queries.get_product_images(7, 1)] == ["x.png"]


def test_transaction_commits(queries):
    with queries.transaction() as tx:
        created = _make(tx)
    assert queries.get_product(created.id, 7).name == "lamp"


def test_transaction_rolls_back_on_error(queries):
    holder = {}
    with pytest.raises(RuntimeError):
        with queries.transaction() as tx:
            holder["id"] = _make(tx).id
            raise RuntimeError("boom")
    with pytest.raises(NoRowsError):
        queries.get_product(holder["id"], 7)


def test_nested_transaction_inner_rollback(queries):
    with queries.transaction() as tx:
        outer = _make(tx, name="outer")
        inner_id = {}
        with pytest.raises(ValueError):
            with tx.transaction() as inner:
                inner_id["id"] = _make(inner, name="inner").id
                raise ValueError("inner failure")
    assert queries.get_product(outer.id, 7).name == "outer"
    with pytest.raises(NoRowsError):
        queries.get_product(inner_id["id"], 7)


def test_create_schema_is_idempotent(queries):
    created = _make(queries)
    queries.create_schema()
    assert queries.get_product(created.id, 7).id == created.id