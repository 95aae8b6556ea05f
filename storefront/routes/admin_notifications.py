# -------- ADMIN NOTIFICATIONS --------
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.notifications import Notification, RecipientRole
from storefront.models.user import User
from storefront.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_admin_notifications(
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Notification).where(Notification.recipient_role == RecipientRole.admin)

    if unread_only:
        query = query.where(Notification.read == False)  # noqa: E712

    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit)


@router.put("/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    notification = session.get(Notification, notification_id)
    if not notification:
        raise HTTPException(404, "Notification not found")

    notification.read = True
    session.add(notification)
    session.commit()
    return {"message": "Notification marked as read"}
