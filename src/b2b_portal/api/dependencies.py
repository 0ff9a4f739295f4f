"""Request-scoped dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from ..models.session import Role, Session


def get_session(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_customer_id: Optional[str] = Header(default=None),
) -> Session:
    """Build the caller's session from headers set by the authenticating proxy."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing session headers")
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown role") from exc
    if role == Role.CUSTOMER and not x_customer_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Customer session without customer id")
    return Session(user_id=x_user_id, role=role, customer_id=x_customer_id or None)


def require_staff_session(session: Session = Depends(get_session)) -> Session:
    if not session.is_staff:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Staff privileges required")
    return session
