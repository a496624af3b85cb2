import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from jeevraksha.database import get_db
from jeevraksha.services.event_bus import event_bus

logger = logging.getLogger(__name__)
router = APIRouter()


async def _relay_events(websocket: WebSocket, queue: asyncio.Queue) -> None:
    """Forward bus events to the client while answering its pings."""

    async def forward() -> None:
        while True:
            event = await queue.get()
            await websocket.send_json(event)

    forwarder = asyncio.create_task(forward())
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    finally:
        forwarder.cancel()
        try:
            await forwarder
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.debug("Event forwarder stopped after send failure")


@router.websocket("/ws/reports")
async def all_reports_ws(websocket: WebSocket):
    """Live feed of every report event, for NGO and admin dashboards.

    Events: report_created, report_status_changed, report_assigned.
    """
    await websocket.accept()
    queue = event_bus.subscribe_all()
    logger.info("Report feed client connected")
    try:
        await _relay_events(websocket, queue)
    except WebSocketDisconnect:
        logger.info("Report feed client disconnected")
    finally:
        event_bus.unsubscribe_all(queue)


@router.websocket("/ws/reports/{report_id}")
async def report_ws(websocket: WebSocket, report_id: str):
    """Live updates for a single report, used by the tracking page."""
    await websocket.accept()
    db = await get_db()

    row = await db.fetch_one("SELECT id FROM reports WHERE id = ?", (report_id,))
    if not row:
        await websocket.send_json({"type": "error", "message": f"Report {report_id} not found"})
        await websocket.close()
        return

    queue = event_bus.subscribe(report_id)
    logger.info("Tracking client connected to report %s", report_id)
    try:
        await _relay_events(websocket, queue)
    except WebSocketDisconnect:
        logger.info("Tracking client disconnected from report %s", report_id)
    finally:
        event_bus.unsubscribe(report_id, queue)
