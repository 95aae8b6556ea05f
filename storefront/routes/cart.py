from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from storefront.database import get_session
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.cart_schemas import (
    CartAddRequest,
    CartLineResponse,
    CartResponse,
    CartUpdateRequest,
)
from storefront.services.cart_service import (
    CartStore,
    clear_cart,
    delete_cart_line,
    load_cart,
    save_cart_line,
)
from storefront.services.pricing import ProductView, requires_unit_choice
from storefront.utils.token import get_current_user


router = APIRouter()


def _cart_response(cart: CartStore) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(**line.model_dump(), total=line.line_total)
            for line in cart
        ],
        total=cart.get_total(),
    )


def _product_view(session: Session, product_id: int) -> ProductView:
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductView.from_product(product)


# View Cart

@router.get("", response_model=CartResponse)
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return _cart_response(load_cart(session, current_user.id))


# Add to Cart

@router.post("/add", response_model=CartResponse)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    product = _product_view(session, data.product_id)

    if data.unit_type is None and requires_unit_choice(product):
        raise HTTPException(400, "Please choose Piece or Packet for this product")

    cart = load_cart(session, current_user.id)
    line = cart.add_item(product, data.quantity, data.unit_type)
    save_cart_line(session, current_user.id, line)

    return _cart_response(cart)


# Update Cart

@router.put("/update/{cart_item_id}", response_model=CartResponse)
def update_cart_item(
    cart_item_id: str,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = load_cart(session, current_user.id)

    line = cart.get(cart_item_id)
    if line is None:
        raise HTTPException(404, "Cart item not found")

    if data.quantity is not None:
        line = cart.update_quantity(cart_item_id, data.quantity)

    if data.unit_type is not None:
        product = _product_view(session, line.product_id)
        line = cart.update_unit_type(cart_item_id, data.unit_type, product)
        if line.cart_item_id != cart_item_id:
            delete_cart_line(session, current_user.id, cart_item_id, commit=False)

    save_cart_line(session, current_user.id, line)
    return _cart_response(cart)


# Remove Cart

@router.delete("/remove/{cart_item_id}", response_model=CartResponse)
def remove_item(
    cart_item_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = load_cart(session, current_user.id)
    cart.remove_item(cart_item_id)
    delete_cart_line(session, current_user.id, cart_item_id)

    return _cart_response(cart)


# Clear Cart

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clear_cart(session, current_user.id)
    return {"message": "Cart cleared"}
