"""SQL storage for user addresses."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS addresses (
        id             INTEGER PRIMARY KEY AUTOINCREMENT,
        owner          TEXT NOT NULL,
        name           TEXT NOT NULL,
        street_address TEXT NOT NULL,
        city           TEXT NOT NULL,
        state          TEXT NOT NULL,
        country        TEXT NOT NULL,
        zip_code       TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS credit_cards (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        owner            TEXT NOT NULL,
        name             TEXT NOT NULL,
        number           TEXT NOT NULL,
        cvv              TEXT NOT NULL,
        expiration_year  TEXT NOT NULL,
        expiration_month TEXT NOT NULL
    )
    """,
)

_ADDRESS_COLUMNS = "id, owner, name, street_address, city, state, country, zip_code"


class NoRowsError(LookupError):
    """Raised when a query that must return a row finds none."""


@dataclass
class AddressRow:
    """A stored address."""

    id: int
    owner: str
    name: str
    street_address: str
    city: str
    state: str
    country: str
    zip_code: str


@dataclass
class CreditCardRow:
    """A stored credit card."""

    id: int
    owner: str
    name: str
    number: str
    cvv: str
    expiration_year: str
    expiration_month: str


@dataclass
class CreateAddressParams:
    owner: str
    name: str
    street_address: str
    city: str
    state: str
    country: str
    zip_code: str


@dataclass
class UpdateAddressParams:
    """Fields left as None keep their stored value."""

    id: int
    owner: str
    name: str
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    zip_code: str | None = None


class AddressQueries:
    """Queries over the address table of one database connection."""

    def __init__(self, conn: sqlite3.Connection | str = ":memory:") -> None:
        if isinstance(conn, sqlite3.Connection):
            self.conn = conn
        else:
            self.conn = sqlite3.connect(conn, isolation_level=None)

    def create_schema(self) -> None:
        """Create the user tables if they do not exist."""
        for statement in _SCHEMA:
            self.conn.execute(statement)

    def _select(self, address_id: int, owner: str, name: str) -> AddressRow:
        row = self.conn.execute(
            f"SELECT {_ADDRESS_COLUMNS} FROM addresses WHERE id = ? AND owner = ? AND name = ?",
            (address_id, owner, name),
        ).fetchone()
        if row is None:
            raise NoRowsError("no rows in result set")
        return AddressRow(*row)

    def create_address(self, params: CreateAddressParams) -> AddressRow:
        """Insert an address and return it with its new id."""
        cur = self.conn.execute(
            "INSERT INTO addresses (owner, name, street_address, city, state, country, "
            "zip_code) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (params.owner, params.name, params.street_address, params.city,
             params.state, params.country, params.zip_code),
        )
        return self._select(cur.lastrowid, params.owner, params.name)

    def update_address(self, params: UpdateAddressParams) -> AddressRow:
        """Update the given fields of an owner's address, or raise NoRowsError."""
        cur = self.conn.execute(
            "UPDATE addresses SET "
            "street_address = coalesce(?, street_address), "
            "city = coalesce(?, city), "
            "state = coalesce(?, state), "
            "country = coalesce(?, country), "
            "zip_code = coalesce(?, zip_code) "
            "WHERE id = ? AND owner = ? AND name = ?",
            (params.street_address, params.city, params.state, params.country,
             params.zip_code, params.id, params.owner, params.name),
        )
        if cur.rowcount == 0:
            raise NoRowsError("no rows in result set")
        return self._select(params.id, params.owner, params.name)

    def delete_address(self, address_id: int, owner: str, name: str) -> AddressRow:
        """Delete an owner's address and return it, or raise NoRowsError."""
        row = self._select(address_id, owner, name)
        self.conn.execute(
            "DELETE FROM addresses WHERE id = ? AND owner = ? AND name = ?",
            (address_id, owner, name),
        )
        return row

    def get_addresses(self, owner: str, name: str) -> list[AddressRow]:
        """All addresses of a user, oldest first."""
        rows = self.conn.execute(
            f"SELECT {_ADDRESS_COLUMNS} FROM addresses WHERE owner = ? AND name = ? "
            "ORDER BY id",
            (owner, name),
        ).fetchall()
        return [AddressRow(*row) for row in rows]


class AddressStore(AddressQueries):
    """Address queries plus running several of them in one transaction."""

    def exec_tx(self, fn: Callable[[AddressQueries], T]) -> T:
        """Run ``fn`` in a transaction: commit on success, roll back on error."""
        self.conn.execute("SAVEPOINT address_tx")
        try:
            result = fn(AddressQueries(self.conn))
        except Exception as err:
            try:
                self.conn.execute("ROLLBACK TO address_tx")
                self.conn.execute("RELEASE address_tx")
            except sqlite3.Error as rb_err:
                raise RuntimeError(
                    f"tx err is: '{err}', rollback err is: '{rb_err}'"
                ) from err
            raise
        self.conn.execute("RELEASE address_tx")
        return result