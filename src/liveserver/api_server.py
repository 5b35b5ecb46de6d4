"""Live server: file serving, tree listing and the change push channel."""

import asyncio
import contextlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request, WebSocket
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse, Response

from src.livetree import ChangeEvent, DirectoryWatcher

from .config import ServerConfig
from .files import find_file, is_text_file, resolve_under
from .packets import (
    InboundPacketType,
    PacketError,
    changed_packet,
    entry_to_dict,
    parse_inbound,
    tree_packet,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _send_file(path: Path, cfg: ServerConfig) -> Response:
    if is_text_file(path, cfg.text_extensions):
        text = path.read_text(encoding="utf-8-sig", errors="replace")
        return Response(content=text.encode("utf-8"), media_type="text/plain; charset=utf-8")
    return FileResponse(path, media_type="application/octet-stream")


def _write_file(path: Path, body: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(body)


async def _pump(websocket: WebSocket, outbox: "asyncio.Queue[dict]") -> None:
    """Send queued packets to the client in order."""
    while True:
        packet = await outbox.get()
        await websocket.send_text(json.dumps(packet))


async def _stop_sender(sender: "asyncio.Task[None]", client: Any) -> None:
    """Cancel the sender task and log how it ended if it failed on its own."""
    sender.cancel()
    with contextlib.suppress(asyncio.CancelledError, Exception):
        await sender
    if not sender.cancelled() and sender.exception() is not None:
        logger.error(f"Sender for {client} failed: {sender.exception()}")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(cfg: ServerConfig, watcher: DirectoryWatcher) -> FastAPI:
    app = FastAPI(title="Live Tree Server", docs_url=None, redoc_url=None)

    app.state.cfg = cfg
    app.state.watcher = watcher

    # ------------------------------------------------------------------
    # Tree API
    # ------------------------------------------------------------------

    @app.get("/api/tree")
    def tree():
        return [entry_to_dict(entry) for entry in watcher.get_entries()]

    @app.post("/api/reload")
    def reload():
        watcher.reload_all()
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Push channel
    # ------------------------------------------------------------------

    @app.websocket("/")
    async def root_socket(websocket: WebSocket):
        await websocket.accept()
        client = websocket.client
        logger.info(f"Opened: {client}")

        loop = asyncio.get_running_loop()
        outbox: "asyncio.Queue[dict]" = asyncio.Queue()

        # Called on whichever thread produced the event.
        def on_changed(event: ChangeEvent) -> None:
            loop.call_soon_threadsafe(outbox.put_nowait, changed_packet(event))

        watcher.subscribe(on_changed)
        sender = asyncio.create_task(_pump(websocket, outbox))

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                text = message.get("text")
                if text is None:
                    continue

                try:
                    packet = parse_inbound(text)
                except PacketError as e:
                    logger.error(f"Bad packet from {client}: {e}")
                    continue

                logger.info(f"Message: {client} {packet.type.value}")

                if packet.type is InboundPacketType.GET_TREE:
                    entries = await run_in_threadpool(watcher.get_entries)
                    outbox.put_nowait(tree_packet(entries))
                elif packet.type is InboundPacketType.RELOAD_ALL:
                    await run_in_threadpool(watcher.reload_all)
        finally:
            watcher.unsubscribe(on_changed)
            await _stop_sender(sender, client)
            logger.info(f"Close: {client}")

    # ------------------------------------------------------------------
    # File serving
    # ------------------------------------------------------------------

    @app.get("/{path:path}")
    def get_file(path: str):
        for base_dir in (cfg.root_dir, cfg.lua_dir):
            if base_dir is None:
                continue
            full_path = find_file(base_dir, path)
            if full_path is not None:
                return _send_file(full_path, cfg)

        return JSONResponse({"error": "File not found"}, status_code=404)

    @app.put("/{path:path}")
    async def put_file(path: str, request: Request):
        full_path = resolve_under(cfg.root_dir, path)
        if full_path is None or full_path.is_dir():
            return JSONResponse({"error": "Invalid path"}, status_code=404)

        body = await request.body()
        await run_in_threadpool(_write_file, full_path, body)
        return {"status": "ok"}

    return app


# ---------------------------------------------------------------------------
# Service wrapper
# ---------------------------------------------------------------------------

class LiveServerService:
    """Wrapper to run the FastAPI server via uvicorn in a background thread."""

    def __init__(
        self,
        host: str,
        port: int,
        cfg: ServerConfig,
        watcher: DirectoryWatcher,
    ):
        self.host = host
        self.port = port
        self.cfg = cfg
        self.watcher = watcher
        self._thread: Optional[threading.Thread] = None
        self._server: Any = None

    def start(self) -> None:
        import uvicorn

        app = create_app(self.cfg, self.watcher)

        config = uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)

        self._thread = threading.Thread(target=self._server.run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._server:
            self._server.should_exit = True
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None


if __name__ == "__main__":
    raise SystemExit("Run via: python -m src.cli serve")
