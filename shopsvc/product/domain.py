"""Product domain model, status rules and use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Protocol


class ProductStatus(IntEnum):
    DRAFT = 0
    PENDING = 1
    APPROVED = 2
    REJECTED = 3


class AuditAction(IntEnum):
    APPROVE = 0
    REJECT = 1


class ProductError(Exception):
    """A domain error with a status code and reason; equal when both match."""

    def __init__(self, code: int, reason: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.reason = reason
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductError):
            return NotImplemented
        return (self.code, self.reason) == (other.code, other.reason)

    def __hash__(self) -> int:
        return hash((self.code, self.reason))

    def __str__(self) -> str:
        return f"error: code = {self.code} reason = {self.reason} message = {self.message}"


ERR_PRODUCT_NOT_FOUND = ProductError(404, "protduct: ", "product not found")
ERR_INVALID_STATUS = ProductError(500, "protduct: ", "invalid status transition")
ERR_STOCK_INSUFFICIENT = ProductError(403, "protduct: ", "insufficient stock")
ERR_AUDIT_REASON_MISSING = ProductError(403, "protduct: ", "reject reason required")
ERR_INVALID_AUDIT_ACTION = ProductError(400, "product", "invalid audit action")

VALID_TRANSITIONS: dict[ProductStatus, frozenset[ProductStatus]] = {
    ProductStatus.DRAFT: frozenset({ProductStatus.PENDING}),
    ProductStatus.PENDING: frozenset({ProductStatus.APPROVED, ProductStatus.REJECTED}),
    ProductStatus.REJECTED: frozenset({ProductStatus.DRAFT}),
}


@dataclass
class AuditRecord:
    id: int = 0
    product_id: int = 0
    old_status: ProductStatus = ProductStatus.DRAFT
    new_status: ProductStatus = ProductStatus.DRAFT
    reason: str = ""
    operator_id: int = 0
    operated_at: datetime | None = None


@dataclass
class AuditInfo:
    audit_id: int = 0
    reason: str = ""
    operator_id: int = 0
    operated_at: datetime | None = None


@dataclass
class CategoryInfo:
    category_id: str = ""
    category_name: str = ""


@dataclass
class ProductImage:
    url: str = ""
    is_primary: bool = False
    sort_order: int | None = None


@dataclass
class Product:
    id: int = 0
    merchant_id: int = 0
    name: str = ""
    price: float = 0.0
    description: str = ""
    stock: int = 0
    images: list[ProductImage] = field(default_factory=list)
    status: ProductStatus = ProductStatus.DRAFT
    category: CategoryInfo = field(default_factory=CategoryInfo)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    audit_info: AuditInfo = field(default_factory=AuditInfo)

    def can_transition_to(self, new_status: ProductStatus) -> bool:
        """Whether the status rules allow moving to ``new_status``."""
        return new_status in VALID_TRANSITIONS.get(self.status, frozenset())

    def change_status(self, new_status: ProductStatus) -> None:
        """Move to ``new_status``, raising ValueError if it is not allowed."""
        if not self.can_transition_to(new_status):
            raise ValueError(
                f"invalid status transition from {int(self.status)} to {int(new_status)}"
            )
        self.status = ProductStatus(new_status)


@dataclass
class SubmitAuditRequest:
    product_id: int
    merchant_id: int
    id: int = 0
    reason: str = ""
    operator_id: int = 0
    operated_at: datetime | None = None


@dataclass
class UpdateProductRequest:
    id: int
    merchant_id: int
    name: str | None = None
    price: float | None = None
    description: str = ""
    stock: int | None = None
    category: CategoryInfo = field(default_factory=CategoryInfo)


@dataclass
class AuditProductRequest:
    product_id: int
    merchant_id: int
    action: int
    reason: str = ""
    operator_id: int = 0


@dataclass
class DeleteProductRequest:
    id: int
    merchant_id: int


@dataclass
class GetProductRequest:
    id: int
    merchant_id: int


@dataclass
class CreateProductRequest:
    product: Product


class ProductRepo(Protocol):
    """Persistence for products and their audits."""

    def create_product(self, req: CreateProductRequest) -> Product: ...

    def update_product(self, req: UpdateProductRequest) -> Product: ...

    def submit_for_audit(self, req: SubmitAuditRequest) -> AuditRecord: ...

    def audit_product(self, req: AuditProductRequest) -> AuditRecord: ...

    def get_product(self, req: GetProductRequest) -> Product: ...

    def delete_product(self, req: DeleteProductRequest) -> None: ...


class ProductUsecase:
    """Product operations, delegated to a repository."""

    def __init__(self, repo: ProductRepo, logger: logging.Logger | None = None) -> None:
        self.repo = repo
        self.log = logger or logging.getLogger(__name__)

    def create_product(self, req: CreateProductRequest) -> Product:
        return self.repo.create_product(req)

    def update_product(self, req: UpdateProductRequest) -> Product:
        return self.repo.update_product(req)

    def submit_for_audit(self, req: SubmitAuditRequest) -> AuditRecord:
        return self.repo.submit_for_audit(req)

    def audit_product(self, req: AuditProductRequest) -> AuditRecord:
        return self.repo.audit_product(req)

    def get_product(self, req: GetProductRequest) -> Product:
        self.log.debug("GetProduct: %r", req)
        return self.repo.get_product(req)

    def delete_product(self, req: DeleteProductRequest) -> None:
        self.log.debug("DeleteProduct: %r", req)
        self.repo.delete_product(req)


def validate_product(product: Product) -> None:
    """Raise ProductError when the name is empty or the price is not positive."""
    if not product.name:
        raise ProductError(403, "", "product name required")
    if product.price <= 0:
        raise ProductError(403, "", "invalid price")