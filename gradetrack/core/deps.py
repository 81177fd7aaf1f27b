from typing import Optional

from fastapi import Header, HTTPException, Request, status
from pydantic import ValidationError

from gradetrack.schemas.user import Identity
from gradetrack.services.tracker import Tracker


# the tracker is built once at startup and shared by every request
def get_tracker(request: Request) -> Tracker:
    return request.app.state.tracker


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=""),
) -> Identity:
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return Identity(id=x_user_id, role=x_user_role, name=x_user_name or "")
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid identity",
        )
