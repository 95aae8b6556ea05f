# -------- ADMIN ORDERS --------
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from storefront.constants.order_status import OrderStatus, PaymentStatus
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.orders_schemas import (
    OrderEventResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummary,
)
from storefront.services.order_event_service import get_order_timeline
from storefront.services.order_lifecycle import delete_order, staff_update
from storefront.services.order_service import get_order, list_all_orders

router = APIRouter()


def _get_order_or_404(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="No Order found with this ID")
    return order


@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    order_status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    return list_all_orders(
        session,
        order_status=order_status.value if order_status else None,
        payment_status=payment_status.value if payment_status else None,
        page=page,
        limit=limit,
        serialize=OrderSummary.model_validate,
    )


@router.get("/{order_ref}", response_model=OrderResponse)
def order_details(
    order_ref: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return OrderResponse.model_validate(get_order(session, order_ref))


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    data: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = _get_order_or_404(session, order_id)
    order = staff_update(
        session,
        order,
        admin,
        order_status=data.order_status,
        payment_status=data.payment_status,
    )
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}")
def remove_order(
    order_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = _get_order_or_404(session, order_id)
    delete_order(session, order, admin)
    return {"message": "Order deleted successfully"}


@router.get("/{order_id}/timeline", response_model=List[OrderEventResponse])
def order_timeline(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    _get_order_or_404(session, order_id)
    return [OrderEventResponse.model_validate(e) for e in get_order_timeline(session, order_id)]
