"""RPC-facing product service: message types, conversions and error mapping."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TypeVar

from .domain import (
    ERR_AUDIT_REASON_MISSING,
    ERR_INVALID_STATUS,
    ERR_PRODUCT_NOT_FOUND,
    AuditAction,
    AuditInfo,
    AuditProductRequest,
    AuditRecord,
    CategoryInfo,
    CreateProductRequest,
    DeleteProductRequest,
    GetProductRequest,
    Product,
    ProductImage,
    ProductStatus,
    ProductUsecase,
    SubmitAuditRequest,
    UpdateProductRequest,
)

R = TypeVar("R")
Q = TypeVar("Q")


class Code(IntEnum):
    """RPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class RpcError(Exception):
    """An error carrying an RPC status code."""

    def __init__(self, code: Code, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.name} desc = {self.message}"


@dataclass
class ImageMessage:
    url: str = ""
    is_primary: bool = False
    sort_order: int = 0


@dataclass
class CategoryMessage:
    category_id: str = ""
    category_name: str = ""


@dataclass
class AuditInfoMessage:
    audit_id: int = 0
    reason: str = ""
    operator_id: int = 0
    operated_at: datetime | None = None


@dataclass
class ProductMessage:
    id: int = 0
    name: str = ""
    description: str = ""
    price: float = 0.0
    stock: int = 0
    status: int = ProductStatus.DRAFT
    merchant_id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: CategoryMessage | None = None
    images: list[ImageMessage] = field(default_factory=list)
    audit_info: AuditInfoMessage | None = None


@dataclass
class AuditRecordMessage:
    id: int = 0
    product_id: int = 0
    old_status: ProductStatus = ProductStatus.DRAFT
    new_status: ProductStatus = ProductStatus.DRAFT
    reason: str = ""
    operator_id: int = 0
    operated_at: datetime | None = None


def _status(value: int) -> ProductStatus:
    """Map a status value, falling back to draft for unknown values."""
    try:
        return ProductStatus(value)
    except ValueError:
        return ProductStatus.DRAFT


def _chain(err: BaseException):
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _is(err: BaseException, target: Exception) -> bool:
    return any(e == target for e in _chain(err))


def convert_error(err: BaseException) -> RpcError:
    """Map a domain error (or one it was raised from) to an RPC error."""
    if _is(err, ERR_PRODUCT_NOT_FOUND):
        return RpcError(Code.NOT_FOUND, str(err))
    if _is(err, ERR_INVALID_STATUS):
        return RpcError(Code.FAILED_PRECONDITION, str(err))
    if _is(err, ERR_AUDIT_REASON_MISSING):
        return RpcError(Code.INVALID_ARGUMENT, str(err))
    return RpcError(Code.INTERNAL, "internal server error")


def to_message(product: Product) -> ProductMessage:
    """Build the wire message for a domain product."""
    message = ProductMessage(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock,
        status=_status(product.status),
        merchant_id=product.merchant_id,
        created_at=product.created_at,
        updated_at=product.updated_at,
        category=CategoryMessage(
            category_id=product.category.category_id,
            category_name=product.category.category_name,
        ),
        images=[
            ImageMessage(
                url=img.url,
                is_primary=img.is_primary,
                sort_order=img.sort_order if img.sort_order is not None else 0,
            )
            for img in product.images
        ],
    )
    info = product.audit_info
    if info.audit_id > 0:
        message.audit_info = AuditInfoMessage(
            audit_id=info.audit_id,
            reason=info.reason,
            operator_id=info.operator_id,
            operated_at=info.operated_at,
        )
    return message


def from_message(message: ProductMessage) -> Product:
    """Build a domain product from a wire message; a zero sort order means unset."""
    category = message.category or CategoryMessage()
    info = message.audit_info
    return Product(
        id=message.id,
        name=message.name,
        description=message.description,
        price=message.price,
        stock=message.stock,
        status=_status(message.status),
        merchant_id=message.merchant_id,
        category=CategoryInfo(
            category_id=category.category_id,
            category_name=category.category_name,
        ),
        images=[
            ProductImage(
                url=img.url,
                is_primary=img.is_primary,
                sort_order=img.sort_order if img.sort_order != 0 else None,
            )
            for img in message.images
        ],
        audit_info=(
            AuditInfo(
                audit_id=info.audit_id,
                reason=info.reason,
                operator_id=info.operator_id,
                operated_at=info.operated_at,
            )
            if info is not None
            else AuditInfo()
        ),
    )


def _record_message(record: AuditRecord) -> AuditRecordMessage:
    return AuditRecordMessage(
        id=record.id,
        product_id=record.product_id,
        old_status=_status(record.old_status),
        new_status=_status(record.new_status),
        reason=record.reason,
        operator_id=record.operator_id,
        operated_at=record.operated_at,
    )


def _invoke(fn: Callable[[Q], R], req: Q) -> R:
    try:
        return fn(req)
    except RpcError:
        raise
    except Exception as err:
        raise convert_error(err) from err


class ProductService:
    """Product operations exposed over RPC."""

    def __init__(self, usecase: ProductUsecase) -> None:
        self.uc = usecase

    def create_product(self, product: ProductMessage) -> ProductMessage:
        created = _invoke(self.uc.create_product, CreateProductRequest(from_message(product)))
        return to_message(created)

    def update_product(self, product_id: int, product: ProductMessage) -> ProductMessage:
        req = UpdateProductRequest(id=product_id, merchant_id=product.merchant_id)
        if product.name:
            req.name = product.name
        if product.price > 0:
            req.price = product.price
        if product.stock >= 0:
            req.stock = int(product.stock)
        if product.description:
            req.description = product.description
        if product.category is not None:
            req.category = CategoryInfo(
                category_id=product.category.category_id,
                category_name=product.category.category_name,
            )
        return to_message(_invoke(self.uc.update_product, req))

    def submit_for_audit(self, product_id: int, merchant_id: int) -> AuditRecordMessage:
        req = SubmitAuditRequest(product_id=product_id, merchant_id=merchant_id)
        return _record_message(_invoke(self.uc.submit_for_audit, req))

    def audit_product(
        self,
        product_id: int,
        merchant_id: int,
        action: int,
        reason: str = "",
        operator_id: int = 0,
    ) -> AuditRecordMessage:
        if action == AuditAction.REJECT and not reason:
            raise RpcError(Code.INVALID_ARGUMENT, "reject reason required")
        req = AuditProductRequest(
            product_id=product_id,
            merchant_id=merchant_id,
            action=int(action),
            reason=reason,
            operator_id=operator_id,
        )
        return _record_message(_invoke(self.uc.audit_product, req))

    def get_product(self, product_id: int, merchant_id: int) -> ProductMessage:
        req = GetProductRequest(id=product_id, merchant_id=merchant_id)
        return to_message(_invoke(self.uc.get_product, req))

    def delete_product(self, product_id: int, merchant_id: int) -> None:
        req = DeleteProductRequest(id=product_id, merchant_id=merchant_id)
        _invoke(self.uc.delete_product, req)