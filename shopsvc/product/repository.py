"""Product persistence built on the product tables."""

from __future__ import annotations

import logging
import math
import sqlite3
from collections.abc import Iterable
from decimal import Decimal

from .domain import (
    ERR_INVALID_AUDIT_ACTION,
    AuditAction,
    AuditProductRequest,
    AuditRecord,
    CreateProductRequest,
    DeleteProductRequest,
    GetProductRequest,
    Product,
    ProductImage,
    ProductStatus,
    SubmitAuditRequest,
    UpdateProductRequest,
)
from .store import (
    CreateAuditParams,
    CreateProductParams,
    ImageParams,
    NoRowsError,
    ProductQueries,
    ProductRow,
    UpdateProductParams,
    UpdateProductStatusParams,
)


def _price(value: float) -> Decimal:
    """A price rounded to cents, as stored."""
    if not math.isfinite(value):
        raise ValueError(f"invalid price format: {value}")
    return Decimal(f"{value:.2f}")


class ProductRepository:
    """Stores products, their images and audits through ProductQueries."""

    def __init__(self, queries: ProductQueries, logger: logging.Logger | None = None) -> None:
        self.queries = queries
        self.log = logger or logging.getLogger(__name__)

    def _load(self, product_id: int, merchant_id: int, context: str) -> ProductRow:
        try:
            return self.queries.get_product(product_id, merchant_id)
        except NoRowsError as exc:
            raise NoRowsError(f"{context}: {exc}") from exc

    def create_product(self, req: CreateProductRequest) -> Product:
        """Insert a product and its images; image failures are only logged."""
        product = req.product
        row = self.queries.create_product(
            CreateProductParams(
                name=product.name,
                price=_price(product.price),
                merchant_id=product.merchant_id,
                description=product.description,
                stock=product.stock,
                status=int(product.status),
            )
        )
        created = Product(
            id=row.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
            status=product.status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
        if product.images:
            try:
                self._create_images(row.id, product.merchant_id, product.images)
            except sqlite3.Error as exc:
                self.log.warning("created product but failed to create images: %s", exc)
        return created

    def update_product(self, req: UpdateProductRequest) -> Product:
        """Apply the set fields of ``req`` over the stored product."""
        current = self._load(req.id, req.merchant_id, "product not found")
        price = _price(req.price) if req.price is not None else current.price
        self.queries.update_product(
            UpdateProductParams(
                id=req.id,
                merchant_id=req.merchant_id,
                name=req.name if req.name is not None else current.name,
                price=price,
                updated_at=current.updated_at,
                description=req.description or current.description,
                stock=current.stock,
                # An edit sends the product back to draft.
                status=int(ProductStatus.DRAFT),
            )
        )
        updated = self._load(req.id, req.merchant_id, "failed to get updated product")
        return self._full_product(updated)

    def submit_for_audit(self, req: SubmitAuditRequest) -> AuditRecord:
        """Record a move to pending and set the product's status accordingly."""
        current = self._load(req.product_id, req.merchant_id, "product not found")
        with self.queries.transaction():
            audit = self.queries.create_audit_record(
                CreateAuditParams(
                    merchant_id=req.merchant_id,
                    product_id=req.product_id,
                    old_status=current.status,
                    new_status=int(ProductStatus.PENDING),
                    reason=None,
                    operator_id=0,
                )
            )
            self.queries.update_product_status(
                UpdateProductStatusParams(
                    id=req.product_id,
                    merchant_id=req.merchant_id,
                    status=int(ProductStatus.PENDING),
                    current_audit_id=audit.id,
                )
            )
        return AuditRecord(
            id=audit.id,
            product_id=req.product_id,
            old_status=ProductStatus(current.status),
            new_status=ProductStatus.PENDING,
            operated_at=audit.created_at,
        )

    def audit_product(self, req: AuditProductRequest) -> AuditRecord:
        """Approve or reject a product, recording the decision."""
        current = self._load(req.product_id, req.merchant_id, "product not found")
        try:
            action = AuditAction(req.action)
        except ValueError:
            raise ERR_INVALID_AUDIT_ACTION from None
        new_status = (
            ProductStatus.APPROVED if action is AuditAction.APPROVE else ProductStatus.REJECTED
        )
        with self.queries.transaction():
            audit = self.queries.create_audit_record(
                CreateAuditParams(
                    merchant_id=req.merchant_id,
                    product_id=req.product_id,
                    old_status=current.status,
                    new_status=int(new_status),
                    reason=req.reason,
                    operator_id=req.operator_id,
                )
            )
            self.queries.update_product_status(
                UpdateProductStatusParams(
                    id=req.product_id,
                    merchant_id=req.merchant_id,
                    status=int(new_status),
                    current_audit_id=audit.id,
                )
            )
        return AuditRecord(
            id=audit.id,
            product_id=req.product_id,
            old_status=ProductStatus(current.status),
            new_status=new_status,
            reason=req.reason,
            operator_id=req.operator_id,
            operated_at=audit.created_at,
        )

    def get_product(self, req: GetProductRequest) -> Product:
        """Fetch a product with its images."""
        row = self._load(req.id, req.merchant_id, "failed to get product")
        return self._full_product(row)

    def delete_product(self, req: DeleteProductRequest) -> None:
        """Soft-delete a product."""
        self.queries.soft_delete_product(req.id, req.merchant_id)

    def _full_product(self, row: ProductRow) -> Product:
        images = self.queries.get_product_images(row.merchant_id, row.id)
        return Product(
            id=row.id,
            merchant_id=row.merchant_id,
            name=row.name,
            description=row.description or "",
            price=float(int(row.price)),
            stock=row.stock or 0,
            status=ProductStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
            images=[
                ProductImage(url=img.url, is_primary=img.is_primary, sort_order=0)
                for img in images
            ],
        )

    def _create_images(
        self, product_id: int, merchant_id: int, images: Iterable[ProductImage]
    ) -> int:
        return self.queries.bulk_create_product_images(
            ImageParams(
                merchant_id=merchant_id,
                product_id=product_id,
                url=img.url,
                is_primary=img.is_primary,
                sort_order=img.sort_order if img.sort_order is not None else 0,
            )
            for img in images
        )