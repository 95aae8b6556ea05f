from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlmodel import Session, select

from storefront.models.order_event import OrderEvent
from storefront.models.user import User


def actor_label(actor: Optional[User]) -> str:
    """``admin:<id>`` / ``user:<id>`` for people, ``system`` otherwise."""
    if actor is None:
        return "system"
    prefix = "admin" if actor.role == "admin" else "user"
    return f"{prefix}:{actor.id}"


def log_order_event(
    session: Session,
    order_id: int,
    event_type: str,
    label: str,
    actor: Optional[User] = None,
    meta: Optional[dict] = None,
) -> OrderEvent:
    """Append an entry to the order's timeline. The caller commits."""
    event = OrderEvent(
        id=str(uuid4()),
        order_id=order_id,
        event_type=event_type,
        label=label,
        meta=meta,
        created_by=actor_label(actor),
        created_at=datetime.utcnow(),
    )
    session.add(event)
    return event


def get_order_timeline(session: Session, order_id: int) -> List[OrderEvent]:
    return session.exec(
        select(OrderEvent)
        .where(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.created_at)
    ).all()


def delete_order_timeline(session: Session, order_id: int) -> None:
    """Drop every event of a deleted order. The caller commits."""
    for event in get_order_timeline(session, order_id):
        session.delete(event)
