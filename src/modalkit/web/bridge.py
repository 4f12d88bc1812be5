"""HTTP/WebSocket bridge between a ModalController and a browser renderer.

The browser owns layout and styling; this module only ships state snapshots
to it and turns its clicks back into :meth:`ModalController.activate` calls.

Routes
------
``GET /api/modal``
    Current state snapshot as JSON.
``POST /api/modal/buttons/{index}``
    Activate button *index*; answers with the resulting snapshot.
``POST /api/modal/close``
    Close the dialog; answers with the hidden snapshot.
``GET /ws``
    WebSocket. The current snapshot is sent on connect and again after every
    state change, as JSON text frames or, with ``?format=msgpack``, as msgpack
    binary frames. The client may send ``{"activate": <index>}`` or
    ``{"close": true}`` text messages.

State changes are published on an :class:`EventBus` topic; every WebSocket
client drains its own bounded subscription, so a slow client only loses
stale snapshots.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any, Callable, Dict, Optional

from aiohttp import WSMsgType, web

from modalkit.core.events import EventBus, Subscription, pack, unpack
from modalkit.errors import ButtonNotFound
from modalkit.modal.controller import ModalController
from modalkit.modal.models import PresentationState

__all__ = ["ModalBridge", "STATE_TOPIC", "serve"]

logger = logging.getLogger(__name__)

STATE_TOPIC = "modal.state"
_FORMATS = ("json", "msgpack")


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


class ModalBridge:
    """Expose *modal* to browser clients through an aiohttp application.

    Parameters
    ----------
    modal: Controller whose state is served.
    heartbeat_s: WebSocket ping interval in seconds.
    queue_size: Pending snapshots kept per WebSocket client.
    """

    def __init__(
        self,
        modal: ModalController,
        *,
        heartbeat_s: float = 30.0,
        queue_size: int = 16,
    ) -> None:
        self._modal = modal
        self._heartbeat_s = float(heartbeat_s)
        self._bus = EventBus(default_maxsize=queue_size)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def bus(self) -> EventBus:
        return self._bus

    def make_app(self) -> web.Application:
        app = web.Application()
        app.add_routes(
            [
                web.get("/api/modal", self._get_state),
                web.post("/api/modal/buttons/{index}", self._activate),
                web.post("/api/modal/close", self._close),
                web.get("/ws", self._websocket),
            ]
        )
        app.on_startup.append(self._on_startup)
        app.on_shutdown.append(self._on_shutdown)
        return app

    # Lifecycle ----------------------------------------------------------
    async def _on_startup(self, app: web.Application) -> None:
        self._unsubscribe = self._modal.subscribe(self._publish_state)

    async def _on_shutdown(self, app: web.Application) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        # Ends every WebSocket pump loop
        self._bus.close()

    def _publish_state(self, state: PresentationState) -> None:
        if not self._bus.closed:
            self._bus.publish(STATE_TOPIC, pack(state.snapshot()))

    def _snapshot(self) -> Dict[str, Any]:
        return self._modal.state.snapshot()

    # HTTP ---------------------------------------------------------------
    async def _get_state(self, request: web.Request) -> web.Response:
        return web.json_response(self._snapshot())

    async def _activate(self, request: web.Request) -> web.Response:
        raw = request.match_info["index"]
        try:
            index = int(raw)
        except ValueError:
            return _error(400, f"button index must be an integer, got {raw!r}")
        try:
            self._modal.activate(index)
        except ButtonNotFound as e:
            return _error(404, str(e))
        except Exception:
            logger.exception("button %d action failed", index)
            return _error(500, "button action failed")
        return web.json_response(self._snapshot())

    async def _close(self, request: web.Request) -> web.Response:
        self._modal.close()
        return web.json_response(self._snapshot())

    # WebSocket ----------------------------------------------------------
    async def _websocket(self, request: web.Request) -> web.StreamResponse:
        fmt = request.query.get("format", "json")
        if fmt not in _FORMATS:
            return _error(400, "format must be one of " + ", ".join(_FORMATS))

        ws = web.WebSocketResponse(heartbeat=self._heartbeat_s)
        await ws.prepare(request)
        logger.debug("ws client connected %s format=%s", request.remote, fmt)

        sub = self._bus.subscribe(STATE_TOPIC)
        pump: Optional[asyncio.Task[None]] = None
        try:
            await self._send(ws, pack(self._snapshot()), fmt)
            pump = asyncio.create_task(self._pump(ws, sub, fmt), name="modal_ws_pump")
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    self._handle_message(msg.data)
                elif msg.type == WSMsgType.ERROR:
                    logger.warning("ws connection error: %s", ws.exception())
        finally:
            sub.close()
            if pump is not None:
                pump.cancel()
                with suppress(asyncio.CancelledError):
                    await pump
            logger.debug("ws client disconnected %s", request.remote)
        return ws

    async def _pump(
        self, ws: web.WebSocketResponse, sub: Subscription, fmt: str
    ) -> None:
        try:
            async for env in sub:
                if ws.closed:
                    break
                await self._send(ws, env.payload, fmt)
        except ConnectionError as e:
            logger.debug("ws send failed: %s", e)
            return
        # Bus closed: server is shutting down
        if not ws.closed:
            await ws.close()

    @staticmethod
    async def _send(ws: web.WebSocketResponse, payload: bytes, fmt: str) -> None:
        if fmt == "msgpack":
            await ws.send_bytes(payload)
        else:
            await ws.send_str(json.dumps(unpack(payload), ensure_ascii=False))

    def _handle_message(self, data: str) -> None:
        try:
            msg = json.loads(data)
        except ValueError:
            logger.warning("ignoring malformed ws message %r", data)
            return
        if not isinstance(msg, dict):
            logger.warning("ignoring ws message that is not an object: %r", data)
            return

        if "activate" in msg:
            try:
                index = int(msg["activate"])
            except (TypeError, ValueError):
                logger.warning("ignoring ws activate with bad index %r", msg["activate"])
                return
            try:
                self._modal.activate(index)
            except ButtonNotFound as e:
                logger.warning("ws activate: %s", e)
            except Exception:
                logger.exception("button %d action failed", index)
        elif msg.get("close"):
            self._modal.close()
        else:
            logger.warning("ignoring unknown ws message %r", data)


async def serve(
    bridge: ModalBridge,
    host: str,
    port: int,
    *,
    stop: Optional[asyncio.Event] = None,
) -> None:
    """Run *bridge* on ``host:port`` until *stop* is set (or forever)."""
    runner = web.AppRunner(bridge.make_app())
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        await site.start()
        logger.info("modal bridge serving at: http://%s:%d/", host, port)
        if stop is None:
            stop = asyncio.Event()
        await stop.wait()
    finally:
        await runner.cleanup()
