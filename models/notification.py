from pydantic import BaseModel
from typing import Literal, Optional


class NotificationOut(BaseModel):
    id: str
    title: str
    title_sw: Optional[str] = None
    message: str
    message_sw: Optional[str] = None
    variant: Literal["default", "destructive"] = "default"
    related_id: Optional[str] = None
    is_read: bool = False
    created_at: str
