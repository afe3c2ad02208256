"""
Notification Service - huduma ya taarifa
Exposes the session's notification feed.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from models.notification import NotificationOut
from services.session import MarketplaceSession, get_session
from utils.helpers import paginate

router = APIRouter()


@router.get("/api/notifications", tags=["Notifications"])
async def get_notifications(
    is_read: bool | None = Query(None, description="Filter by read status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    session: MarketplaceSession = Depends(get_session),
):
    """Taarifa zangu (Get notifications, newest first)."""
    items = [NotificationOut(**n) for n in session.notifier.list(is_read)]
    return paginate(items, page, page_size)


@router.get("/api/notifications/unread-count", tags=["Notifications"])
async def get_unread_count(session: MarketplaceSession = Depends(get_session)):
    """Idadi ya taarifa ambazo hazijasomwa (Get unread notification count)."""
    return {"unread_count": session.notifier.unread_count()}


@router.put("/api/notifications/read-all", tags=["Notifications"])
async def mark_all_as_read(session: MarketplaceSession = Depends(get_session)):
    """Weka taarifa zote kama zimesomwa (Mark all notifications as read)."""
    session.notifier.mark_all_read()
    return {"message": "Taarifa zote zimesomwa (All notifications marked as read)"}


@router.put("/api/notifications/{notification_id}/read", tags=["Notifications"])
async def mark_as_read(notification_id: str, session: MarketplaceSession = Depends(get_session)):
    """Weka taarifa kama imesomwa (Mark notification as read)."""
    notif = session.notifier.mark_read(notification_id)
    if notif is None:
        raise HTTPException(status_code=404, detail="Taarifa haikupatikana (Notification not found)")
    return {"message": "Taarifa imesomwa (Marked as read)", "notification": NotificationOut(**notif)}
