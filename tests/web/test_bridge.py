from __future__ import annotations

import asyncio
from typing import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import WSMsgType
from aiohttp.test_utils import TestClient, TestServer

from modalkit.core.events import unpack
from modalkit.modal.controller import ModalController
from modalkit.web.bridge import STATE_TOPIC, ModalBridge, serve

HIDDEN = {"visible": False, "icon": "", "title": "", "message": "", "buttons": []}


@pytest_asyncio.fixture
async def bridge_client(
    modal: ModalController,
) -> AsyncIterator[TestClient]:
    bridge = ModalBridge(modal, heartbeat_s=5.0, queue_size=8)
    client = TestClient(TestServer(bridge.make_app()))
    await client.start_server()
    try:
        yield client
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_get_state(bridge_client: TestClient, modal: ModalController) -> None:
    resp = await bridge_client.get("/api/modal")
    assert resp.status == 200
    assert await resp.json() == HIDDEN

    modal.success("Saved")
    data = await (await bridge_client.get("/api/modal")).json()
    assert data["visible"] is True
    assert data["icon"] == "✅"
    assert data["buttons"] == [
        {"index": 0, "text": "OK", "primary": True, "danger": False}
    ]


@pytest.mark.asyncio
async def test_activate_button(
    bridge_client: TestClient, modal: ModalController
) -> None:
    confirmed: list[bool] = []
    modal.confirm("Delete?", on_confirm=lambda: confirmed.append(modal.visible))
    resp = await bridge_client.post("/api/modal/buttons/0")
    assert resp.status == 200
    assert await resp.json() == HIDDEN
    assert confirmed == [False]


@pytest.mark.asyncio
async def test_activate_missing_or_bad_index(
    bridge_client: TestClient, modal: ModalController
) -> None:
    resp = await bridge_client.post("/api/modal/buttons/0")
    assert resp.status == 404
    assert "no dialog is visible" in (await resp.json())["error"]

    modal.info("hi")
    resp = await bridge_client.post("/api/modal/buttons/first")
    assert resp.status == 400
    assert modal.visible


@pytest.mark.asyncio
async def test_failing_action_returns_500(
    bridge_client: TestClient, modal: ModalController
) -> None:
    def boom() -> None:
        raise RuntimeError("boom")

    modal.confirm("Delete?", on_cancel=boom)
    resp = await bridge_client.post("/api/modal/buttons/1")
    assert resp.status == 500
    assert modal.visible is False


@pytest.mark.asyncio
async def test_close(bridge_client: TestClient, modal: ModalController) -> None:
    modal.error("broken")
    resp = await bridge_client.post("/api/modal/close")
    assert resp.status == 200
    assert await resp.json() == HIDDEN
    assert modal.visible is False


@pytest.mark.asyncio
async def test_ws_pushes_snapshots(
    bridge_client: TestClient, modal: ModalController
) -> None:
    ws = await bridge_client.ws_connect("/ws")
    assert await ws.receive_json(timeout=2) == HIDDEN

    modal.info("Firmware is up to date")
    pushed = await ws.receive_json(timeout=2)
    assert pushed["visible"] is True
    assert pushed["title"] == "Info"
    assert pushed["message"] == "Firmware is up to date"

    await ws.send_json({"activate": 0})
    assert await ws.receive_json(timeout=2) == HIDDEN
    await ws.close()


@pytest.mark.asyncio
async def test_ws_msgpack_and_close_message(
    bridge_client: TestClient, modal: ModalController
) -> None:
    modal.success("Saved")
    ws = await bridge_client.ws_connect("/ws?format=msgpack")
    msg = await ws.receive(timeout=2)
    assert msg.type == WSMsgType.BINARY
    assert unpack(msg.data)["message"] == "Saved"

    await ws.send_json({"close": True})
    msg = await ws.receive(timeout=2)
    assert unpack(msg.data) == HIDDEN
    await ws.close()


@pytest.mark.asyncio
async def test_ws_ignores_bad_messages(
    bridge_client: TestClient, modal: ModalController
) -> None:
    modal.info("stay")
    ws = await bridge_client.ws_connect("/ws")
    await ws.receive_json(timeout=2)

    await ws.send_str("not json")
    await ws.send_json([1, 2])
    await ws.send_json({"activate": "x"})
    await ws.send_json({"activate": 7})
    await ws.send_json({"unknown": 1})
    await asyncio.sleep(0.05)
    assert modal.visible
    assert modal.message == "stay"
    await ws.close()


@pytest.mark.asyncio
async def test_ws_rejects_unknown_format(bridge_client: TestClient) -> None:
    resp = await bridge_client.get("/ws?format=xml")
    assert resp.status == 400


@pytest.mark.asyncio
async def test_shutdown_stops_publishing(modal: ModalController) -> None:
    bridge = ModalBridge(modal)
    client = TestClient(TestServer(bridge.make_app()))
    await client.start_server()
    ws = await client.ws_connect("/ws")
    await ws.receive_json(timeout=2)
    await ws.close()
    await client.close()

    assert bridge.bus.closed
    # Further state changes no longer reach the closed bus
    modal.info("after shutdown")
    assert bridge.bus.metrics().topics[STATE_TOPIC].publishes == 0


@pytest.mark.asyncio
async def test_serve_until_stopped(modal: ModalController) -> None:
    stop = asyncio.Event()
    task = asyncio.create_task(serve(ModalBridge(modal), "127.0.0.1", 0, stop=stop))
    await asyncio.sleep(0.05)
    stop.set()
    await asyncio.wait_for(task, timeout=5)
