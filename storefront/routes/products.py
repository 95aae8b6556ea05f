from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
from sqlmodel import Session, select
from storefront.database import get_session
from storefront.models.product import Category, Product
from storefront.schemas.product_schemas import ProductDetail, ProductResponse
from storefront.services.pricing import requires_unit_choice, resolve_unit_price
from storefront.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_products(
    page: int = 1,
    limit: int = 12,
    category: Optional[Category] = None,
    sub_category: Optional[str] = None,
    academic_category: Optional[str] = None,
    class_name: Optional[str] = None,
    session: Session = Depends(get_session),
):
    query = select(Product)

    if category:
        query = query.where(Product.category == category)
    if sub_category:
        query = query.where(Product.sub_category == sub_category)
    if academic_category:
        query = query.where(Product.academic_category == academic_category)
    if class_name:
        query = query.where(Product.class_name == class_name)

    query = query.order_by(Product.created_at.desc(), Product.id.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=ProductResponse.model_validate,
    )


@router.get("/{product_id}", response_model=ProductDetail)
def product_detail(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    return ProductDetail(
        **ProductResponse.model_validate(product).model_dump(),
        effective_price=resolve_unit_price(product),
        requires_unit_choice=requires_unit_choice(product),
    )
