"""
Current-user provider.

Identity verification (phone OTP) happens before requests reach this API; the
verified phone number arrives in the ``X-User-Phone`` header.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from .schemas import User
from .shared.validators import validate_kr_phone
from .store import DataStore, get_store

logger = logging.getLogger(__name__)


def get_current_user(
    x_user_phone: Optional[str] = Header(None),
    store: DataStore = Depends(get_store),
) -> User:
    """Resolve the acting user from the X-User-Phone header"""
    if not x_user_phone:
        raise HTTPException(status_code=401, detail="Not authenticated. Provide the X-User-Phone header.")

    try:
        phone = validate_kr_phone(x_user_phone)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    user = store.users.get(phone)
    if not user:
        logger.warning(f"⚠️ Unknown user attempted access: {phone}")
        raise HTTPException(status_code=401, detail="User not found. Please sign up first.")
    return user


def require_role(role: str):
    """Dependency factory that only lets users holding ``role`` through"""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(role):
            logger.warning(f"⚠️ User {current_user.phone} denied: missing role {role}")
            raise HTTPException(status_code=403, detail=f"This action requires the {role} role")
        return current_user

    return dependency
