"""FastAPI dependency utilities."""

from fastapi import Header, HTTPException, Request, status

from app.bootstrap import NotificationServices


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the user id forwarded by the upstream authenticator."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증 정보가 없습니다.",
        )
    return user_id


def get_notification_services(request: Request) -> NotificationServices:
    """Return the services built at application startup."""

    services = getattr(request.app.state, "notifications", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="알림 서비스가 준비되지 않았습니다.",
        )
    return services
