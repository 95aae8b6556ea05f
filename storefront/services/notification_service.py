from typing import Optional
from sqlmodel import Session
from storefront.models.notifications import (
    Notification,
    NotificationType,
    RecipientRole,
)


def create_notification(
    *,
    session: Session,
    type: NotificationType,
    message: str,
    related_id: Optional[int] = None,
    recipient_role: RecipientRole = RecipientRole.admin,
):
    notification = Notification(
        recipient_role=recipient_role,
        type=type,
        message=message,
        related_id=related_id,
    )
    session.add(notification)
    session.flush()
    return notification
