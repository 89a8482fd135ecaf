"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from app.bootstrap import NotificationServices
from app.domain.entities import (
    ERROR_NOT_FOUND,
    ERROR_PERMISSION,
    Notification,
    OperationResult,
)
from app.interfaces.api.dependencies import (
    get_current_user_id,
    get_notification_services,
)
from app.interfaces.api.schemas import (
    BulkUpdateRead,
    NotificationPageRead,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    ERROR_PERMISSION: status.HTTP_403_FORBIDDEN,
    ERROR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _raise_for_failure(result: OperationResult[Any]) -> NoReturn:
    raise HTTPException(
        status_code=_STATUS_BY_ERROR.get(
            result.error_code, status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        detail=result.error,
    )


def _to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = None,
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationPageRead:
    """Return a page of the caller's notifications, newest first."""

    result = services.records.list_for_user(user_id, limit=limit, cursor=cursor)
    if not result.success:
        _raise_for_failure(result)
    page = result.value
    return NotificationPageRead(
        notifications=[_to_read_model(item) for item in page.notifications],
        next_cursor=page.next_cursor,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> UnreadCountRead:
    result = services.records.count_unread(user_id)
    if not result.success:
        _raise_for_failure(result)
    return UnreadCountRead(count=result.value)


@router.get("/preferences", response_model=NotificationPreferencesRead)
def read_preferences(
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationPreferencesRead:
    """Return the caller's email settings; unset users get everything enabled."""

    try:
        preferences = services.preferences.get_preferences(user_id)
    except Exception as exc:
        logger.error("Reading notification settings for %s failed: %s", user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="알림 설정을 조회하는데 실패했습니다.",
        ) from exc
    return NotificationPreferencesRead.model_validate(preferences)


@router.put("/preferences", response_model=NotificationPreferencesRead)
def update_preferences(
    payload: NotificationPreferencesUpdate,
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> NotificationPreferencesRead:
    result = services.preferences.update_preferences(user_id, payload.flags())
    if not result.success:
        _raise_for_failure(result)
    return NotificationPreferencesRead.model_validate(result.value)


@router.post("/read-all", response_model=BulkUpdateRead)
def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> BulkUpdateRead:
    result = services.records.mark_all_read(user_id)
    if not result.success:
        _raise_for_failure(result)
    return BulkUpdateRead(affected=result.value)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> Response:
    result = services.records.mark_read(notification_id, user_id)
    if not result.success:
        _raise_for_failure(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", response_model=BulkUpdateRead)
def delete_all(
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> BulkUpdateRead:
    result = services.records.delete_all(user_id)
    if not result.success:
        _raise_for_failure(result)
    return BulkUpdateRead(affected=result.value)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    services: NotificationServices = Depends(get_notification_services),
) -> Response:
    result = services.records.delete(notification_id, user_id)
    if not result.success:
        _raise_for_failure(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream the caller's latest notifications and unread count."""

    user_id = (websocket.query_params.get("user_id") or "").strip()
    services: NotificationServices | None = getattr(
        websocket.app.state, "notifications", None
    )
    if not user_id or services is None:
        await websocket.close(code=1008)
        return

    publisher = services.publisher
    await services.connections.connect(user_id, websocket)
    unsubscribers = []
    try:
        # subscribing pushes a first snapshot read from the database
        unsubscribers.append(
            await to_thread.run_sync(
                services.records.subscribe,
                user_id,
                lambda items: publisher.publish_notifications(user_id, items),
                lambda exc: publisher.publish_error(user_id, exc),
            )
        )
        unsubscribers.append(
            await to_thread.run_sync(
                services.records.subscribe_unread_count,
                user_id,
                lambda count: publisher.publish_unread_count(user_id, count),
                lambda exc: publisher.publish_error(user_id, exc),
            )
        )

        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for %s", user_id)
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()
        services.connections.disconnect(user_id, websocket)
