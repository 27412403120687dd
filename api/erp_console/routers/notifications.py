# erp_console/routers/notifications.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..constants import NOTIFICATION_TYPE_LABELS, label
from ..deps import Console, decorate, get_console, query_params
from ..models import NotificationBroadcastIn

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _with_labels(body: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(body.get("data"), list):
        return body
    rows = [{**r, "typeLabel": label(NOTIFICATION_TYPE_LABELS, r.get("notificationType"))} for r in body["data"]]
    return {**body, "data": rows}


@router.get("")
def list_notifications(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return _with_labels(console.notifications.list(params))


@router.get("/unread")
def unread_notifications(console: Console = Depends(get_console)):
    return _with_labels(console.notifications.unread())


@router.get("/unread-count")
def unread_count(console: Console = Depends(get_console)):
    body = console.notifications.unread_count()
    poller = console.poller.state() if console.poller else None
    return decorate(body, poller=poller)


@router.put("/read-all")
def mark_all_read(console: Console = Depends(get_console)):
    return console.notifications.mark_all_read()


@router.delete("/read")
def delete_read(console: Console = Depends(get_console)):
    return console.notifications.delete_read()


@router.post("/broadcast")
def broadcast(payload: NotificationBroadcastIn, console: Console = Depends(get_console)):
    return console.notifications.broadcast(payload)


@router.put("/{id}/read")
def mark_read(id: int, console: Console = Depends(get_console)):
    return console.notifications.mark_read(id)


@router.delete("/{id}")
def delete_notification(id: int, console: Console = Depends(get_console)):
    return console.notifications.delete(id)
