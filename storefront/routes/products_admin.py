# -------- ADMIN PRODUCTS --------
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.cart import CartItem
from storefront.models.product import Category, Product
from storefront.models.user import User
from storefront.schemas.product_schemas import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

NON_NULLABLE_FIELDS = ("name", "description", "price", "images")


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    product = Product(**data.model_dump(), created_by=admin.id)

    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product {product.id} created by admin {admin.id}")
    return product


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    changes = data.model_dump(exclude_unset=True)
    for key in NON_NULLABLE_FIELDS:
        if key in changes and changes[key] is None:
            raise HTTPException(400, f"{key} cannot be empty")

    if product.category == Category.book:
        if changes.get("price_per_piece") is not None or changes.get("price_per_packet") is not None:
            raise HTTPException(400, "Books are not sold per piece or per packet")
    elif changes.get("market_price") is not None or changes.get("price_to_sell") is not None:
        raise HTTPException(400, "Only books carry a market price and selling price")

    for key, value in changes.items():
        setattr(product, key, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    # orders keep their own snapshot, only open carts point at the product
    for item in session.exec(select(CartItem).where(CartItem.product_id == product_id)).all():
        session.delete(item)

    session.delete(product)
    session.commit()

    logger.info(f"Product {product_id} deleted by admin {admin.id}")
    return {"message": "Product deleted"}
