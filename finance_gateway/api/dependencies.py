"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Header, HTTPException, Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Owner of every record touched by the request (X-User-ID header)"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-ID header")
    return x_user_id


def get_today() -> date:
    """Reference date for interest accrual and due-date projections"""
    return date.today()
