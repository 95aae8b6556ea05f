from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.orders_schemas import OrderResponse, OrderSummary
from storefront.services.cart_service import load_cart
from storefront.services.order_lifecycle import user_cancel
from storefront.services.order_service import get_order, list_orders, place_order
from storefront.utils.token import get_current_user

router = APIRouter()


# Place Order

@router.post("/new", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def new_order(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = load_cart(session, current_user.id)
    order = place_order(session, cart, current_user)
    return OrderResponse.model_validate(order)


# My Orders

@router.get("/me", response_model=List[OrderSummary])
def my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return [OrderSummary.model_validate(o) for o in list_orders(session, current_user.id)]


# Order Details

@router.get("/{order_ref}", response_model=OrderResponse)
def order_details(
    order_ref: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = get_order(session, order_ref)

    if order.user_id != current_user.id and current_user.role != "admin":
        raise HTTPException(404, "No Order found with this ID")

    return OrderResponse.model_validate(order)


# Cancel Order

@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(404, "No Order found with this ID")

    order = user_cancel(session, order, current_user)

    return {
        "message": "Order has been cancelled successfully",
        "order": OrderResponse.model_validate(order),
    }
