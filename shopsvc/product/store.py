"""SQL storage for products, their images and their audit records."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS products (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        merchant_id      INTEGER NOT NULL,
        name             TEXT    NOT NULL,
        description      TEXT,
        price            TEXT    NOT NULL,
        stock            INTEGER,
        status           INTEGER NOT NULL DEFAULT 0,
        current_audit_id INTEGER,
        created_at       TEXT    NOT NULL,
        updated_at       TEXT    NOT NULL,
        deleted_at       TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_images (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        merchant_id INTEGER NOT NULL,
        product_id  INTEGER NOT NULL,
        url         TEXT    NOT NULL,
        is_primary  INTEGER NOT NULL DEFAULT 0,
        sort_order  INTEGER,
        created_at  TEXT    NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_audits (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        merchant_id INTEGER NOT NULL,
        product_id  INTEGER NOT NULL,
        old_status  INTEGER NOT NULL,
        new_status  INTEGER NOT NULL,
        reason      TEXT,
        operator_id INTEGER NOT NULL,
        created_at  TEXT    NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_attributes (
        merchant_id INTEGER NOT NULL,
        product_id  INTEGER NOT NULL,
        attributes  BLOB,
        created_at  TEXT NOT NULL,
        updated_at  TEXT NOT NULL,
        PRIMARY KEY (merchant_id, product_id)
    )
    """,
)

_PRODUCT_COLUMNS = (
    "id, name, description, price, stock, status, merchant_id, "
    "current_audit_id, created_at, updated_at"
)
_IMAGE_COLUMNS = "id, merchant_id, product_id, url, is_primary, sort_order, created_at"
_AUDIT_COLUMNS = (
    "id, merchant_id, product_id, old_status, new_status, reason, operator_id, created_at"
)


class NoRowsError(LookupError):
    """Raised when a query that must return a row finds none."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_ts(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _from_ts(text: str | None) -> datetime | None:
    return None if text is None else datetime.fromisoformat(text)


def _to_decimal(value: Decimal | float | int | str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"invalid price: {value!r}") from exc


@dataclass
class ProductRow:
    """A stored product."""

    id: int
    name: str
    description: str | None
    price: Decimal
    stock: int | None
    status: int
    merchant_id: int
    current_audit_id: int | None
    created_at: datetime
    updated_at: datetime


@dataclass
class ProductImageRow:
    """A stored product image."""

    id: int
    merchant_id: int
    product_id: int
    url: str
    is_primary: bool
    sort_order: int | None
    created_at: datetime


@dataclass
class AuditRow:
    """A stored audit record."""

    id: int
    merchant_id: int
    product_id: int
    old_status: int
    new_status: int
    reason: str | None
    operator_id: int
    created_at: datetime


@dataclass
class CreateProductParams:
    name: str
    price: Decimal | float | int | str
    merchant_id: int
    description: str | None = None
    stock: int | None = None
    status: int = 0


@dataclass
class UpdateProductParams:
    """Full replacement of a product's fields, guarded by its last update time."""

    id: int
    merchant_id: int
    name: str
    price: Decimal | float | int | str
    updated_at: datetime
    description: str | None = None
    stock: int | None = None
    status: int = 0


@dataclass
class UpdateProductStatusParams:
    id: int
    merchant_id: int
    status: int
    current_audit_id: int | None = None


@dataclass
class CreateAuditParams:
    merchant_id: int
    product_id: int
    old_status: int
    new_status: int
    reason: str | None = None
    operator_id: int = 0


@dataclass
class ImageParams:
    merchant_id: int
    product_id: int
    url: str
    is_primary: bool = False
    sort_order: int | None = None


def _product(row: tuple) -> ProductRow:
    (pid, name, description, price, stock, status, merchant_id,
     audit_id, created_at, updated_at) = row
    return ProductRow(
        id=pid,
        name=name,
        description=description,
        price=Decimal(price),
        stock=stock,
        status=status,
        merchant_id=merchant_id,
        current_audit_id=audit_id,
        created_at=_from_ts(created_at),
        updated_at=_from_ts(updated_at),
    )


def _image(row: tuple) -> ProductImageRow:
    iid, merchant_id, product_id, url, is_primary, sort_order, created_at = row
    return ProductImageRow(
        id=iid,
        merchant_id=merchant_id,
        product_id=product_id,
        url=url,
        is_primary=bool(is_primary),
        sort_order=sort_order,
        created_at=_from_ts(created_at),
    )


def _audit(row: tuple) -> AuditRow:
    aid, merchant_id, product_id, old, new, reason, operator_id, created_at = row
    return AuditRow(
        id=aid,
        merchant_id=merchant_id,
        product_id=product_id,
        old_status=old,
        new_status=new,
        reason=reason,
        operator_id=operator_id,
        created_at=_from_ts(created_at),
    )


class ProductQueries:
    """Queries over the product tables of one database connection."""

    def __init__(self, conn: sqlite3.Connection | str = ":memory:") -> None:
        if isinstance(conn, sqlite3.Connection):
            self.conn = conn
        else:
            self.conn = sqlite3.connect(conn, isolation_level=None)
        self._depth = 0

    def create_schema(self) -> None:
        """Create the product tables if they do not exist."""
        for statement in _SCHEMA:
            self.conn.execute(statement)

    @contextmanager
    def transaction(self) -> Iterator[ProductQueries]:
        """Run a block atomically: commit on success, roll back on any exception."""
        self._depth += 1
        name = f"product_tx_{self._depth}"
        self.conn.execute(f"SAVEPOINT {name}")
        try:
            yield self
        except BaseException:
            self.conn.execute(f"ROLLBACK TO {name}")
            self.conn.execute(f"RELEASE {name}")
            raise
        else:
            self.conn.execute(f"RELEASE {name}")
        finally:
            self._depth -= 1

    def create_product(self, params: CreateProductParams) -> ProductRow:
        """Insert a product and return it with its new id and timestamps."""
        now = _to_ts(_now())
        price = _to_decimal(params.price)
        cur = self.conn.execute(
            "INSERT INTO products (name, description, price, stock, status, "
            "merchant_id, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (params.name, params.description, str(price), params.stock,
             int(params.status), params.merchant_id, now, now),
        )
        row = self.conn.execute(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = ?", (cur.lastrowid,)
        ).fetchone()
        return _product(row)

    def get_product(self, product_id: int, merchant_id: int) -> ProductRow:
        """Fetch a product that is not soft-deleted, or raise NoRowsError."""
        row = self.conn.execute(
            f"SELECT {_PRODUCT_COLUMNS} FROM products "
            "WHERE id = ? AND merchant_id = ? AND deleted_at IS NULL",
            (product_id, merchant_id),
        ).fetchone()
        if row is None:
            raise NoRowsError("no rows in result set")
        return _product(row)

    def update_product(self, params: UpdateProductParams) -> int:
        """Replace a product's fields if it was not changed since ``updated_at``.

        Returns the number of rows changed: 0 when the version check fails.
        """
        price = _to_decimal(params.price)
        cur = self.conn.execute(
            "UPDATE products SET name = ?, description = ?, price = ?, stock = ?, "
            "status = ?, updated_at = ? "
            "WHERE id = ? AND merchant_id = ? AND updated_at = ?",
            (params.name, params.description, str(price), params.stock,
             int(params.status), _to_ts(_now()), params.id, params.merchant_id,
             _to_ts(params.updated_at)),
        )
        return cur.rowcount

    def update_product_status(self, params: UpdateProductStatusParams) -> int:
        """Set a product's status and current audit; returns rows changed."""
        cur = self.conn.execute(
            "UPDATE products SET status = ?, current_audit_id = ?, updated_at = ? "
            "WHERE id = ? AND merchant_id = ?",
            (int(params.status), params.current_audit_id, _to_ts(_now()),
             params.id, params.merchant_id),
        )
        return cur.rowcount

    def soft_delete_product(self, product_id: int, merchant_id: int) -> int:
        """Mark a product deleted; returns rows changed."""
        cur = self.conn.execute(
            "UPDATE products SET deleted_at = ? WHERE id = ? AND merchant_id = ?",
            (_to_ts(_now()), product_id, merchant_id),
        )
        return cur.rowcount

    def create_audit_record(self, params: CreateAuditParams) -> AuditRow:
        """Insert an audit record and return it with its id and creation time."""
        cur = self.conn.execute(
            "INSERT INTO product_audits (merchant_id, product_id, old_status, "
            "new_status, reason, operator_id, created_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (params.merchant_id, params.product_id, int(params.old_status),
             int(params.new_status), params.reason, params.operator_id,
             _to_ts(_now())),
        )
        row = self.conn.execute(
            f"SELECT {_AUDIT_COLUMNS} FROM product_audits WHERE id = ?", (cur.lastrowid,)
        ).fetchone()
        return _audit(row)

    def bulk_create_product_images(self, images: Iterable[ImageParams]) -> int:
        """Insert many images at once; returns how many were inserted."""
        now = _to_ts(_now())
        rows = [
            (img.merchant_id, img.product_id, img.url, int(bool(img.is_primary)),
             img.sort_order, now)
            for img in images
        ]
        if not rows:
            return 0
        self.conn.executemany(
            "INSERT INTO product_images (merchant_id, product_id, url, is_primary, "
            "sort_order, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            rows,
        )
        return len(rows)

    def get_product_images(self, merchant_id: int, product_id: int) -> list[ProductImageRow]:
        """A product's images by ascending sort order, unordered ones last."""
        rows = self.conn.execute(
            f"SELECT {_IMAGE_COLUMNS} FROM product_images "
            "WHERE merchant_id = ? AND product_id = ? "
            "ORDER BY sort_order IS NULL, sort_order, id",
            (merchant_id, product_id),
        ).fetchall()
        return [_image(row) for row in rows]