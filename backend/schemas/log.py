from datetime import datetime
from typing import Any, Optional

from schemas.common import ORMBase


class LogResponse(ORMBase):
    id: int
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None
