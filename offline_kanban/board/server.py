"""FastAPI server for the board with WebSocket support."""

from __future__ import annotations

import asyncio
from typing import Any, Final

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import BaseModel

from .drag import DragSession
from .models import Board
from .store import BoardStore

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8765


class NewTaskRequest(BaseModel):
    content: str


class MoveTaskRequest(BaseModel):
    column_id: str
    index: int = 0


class DragStartRequest(BaseModel):
    item_id: str


class DragOverRequest(BaseModel):
    item_id: str
    target_container_id: str | None = None


class DragEndRequest(BaseModel):
    item_id: str
    target_container_id: str | None = None
    target_sibling_id: str | None = None


class BoardServer:
    """
    HTTP front for one board: snapshot reads, commands and drag events.

    Every successful change is pushed to all open ``/ws`` connections.
    Commands always answer 200 with the current board, changed or not.
    """

    def __init__(
        self,
        store: BoardStore,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ):
        """
        Initialize the board server.

        Args:
            store: Board owner the server reads from and sends commands to
            host: Host to bind to
            port: Port to bind to
        """
        self.host = host
        self.port = port
        self.store = store
        self.drag = DragSession(store)
        self.app = FastAPI(title="Offline Kanban", version="0.1.0")
        self.active_connections: list[WebSocket] = []
        self._pending: set[asyncio.Task[None]] = set()
        self._setup_routes()
        self._uvicorn_server: Any = None

        self.store.subscribe(self._on_board_update)

    def _drag_state(self) -> dict[str, Any]:
        task = self.drag.active_task
        return {
            "active": self.drag.is_active,
            "active_task": task.to_dict() if task else None,
            "board": self.store.board.to_dict(),
        }

    def _setup_routes(self) -> None:
        """Setup FastAPI routes."""

        @self.app.get("/")
        async def root() -> dict[str, Any]:
            board = self.store.board
            return {
                "ok": True,
                "columns": len(board.columns),
                "tasks": board.task_count,
            }

        @self.app.get("/api/board")
        async def get_board() -> dict[str, Any]:
            return self.store.board.to_dict()

        @self.app.post("/api/columns/{column_id}/tasks")
        async def add_task(column_id: str, payload: NewTaskRequest) -> dict[str, Any]:
            return self.store.add_task(column_id, payload.content).to_dict()

        @self.app.delete("/api/tasks/{task_id}")
        async def delete_task(task_id: str) -> dict[str, Any]:
            return self.store.delete_task(task_id).to_dict()

        @self.app.post("/api/tasks/{task_id}/move")
        async def move_task(task_id: str, payload: MoveTaskRequest) -> dict[str, Any]:
            return self.store.move_task(task_id, payload.column_id, payload.index).to_dict()

        @self.app.post("/api/drag/start")
        async def drag_start(payload: DragStartRequest) -> dict[str, Any]:
            self.drag.drag_start(payload.item_id)
            return self._drag_state()

        @self.app.post("/api/drag/over")
        async def drag_over(payload: DragOverRequest) -> dict[str, Any]:
            self.drag.drag_over(payload.item_id, payload.target_container_id)
            return self._drag_state()

        @self.app.post("/api/drag/end")
        async def drag_end(payload: DragEndRequest) -> dict[str, Any]:
            self.drag.drag_end(
                payload.item_id,
                payload.target_container_id,
                payload.target_sibling_id,
            )
            return self._drag_state()

        @self.app.post("/api/drag/cancel")
        async def drag_cancel() -> dict[str, Any]:
            self.drag.drag_cancel()
            return self._drag_state()

        @self.app.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket) -> None:
            """WebSocket endpoint for real-time updates."""
            await websocket.accept()
            self.active_connections.append(websocket)

            try:
                await websocket.send_json(self.store.board.to_dict())

                while True:
                    try:
                        await asyncio.wait_for(websocket.receive_text(), timeout=30.0)
                    except TimeoutError:
                        await websocket.send_json({"type": "ping"})
            except WebSocketDisconnect:
                logger.debug("WebSocket client disconnected")
            finally:
                if websocket in self.active_connections:
                    self.active_connections.remove(websocket)

    def _on_board_update(self, board: Board) -> None:
        """Schedule a broadcast when the change happened on the event loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Board changed outside the server loop; no broadcast")
            return
        task = loop.create_task(self._broadcast_update(board))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _broadcast_update(self, board: Board) -> None:
        """Broadcast the board to all connected clients."""
        if not self.active_connections:
            return

        snapshot = board.to_dict()
        disconnected = []

        for connection in list(self.active_connections):
            try:
                await connection.send_json(snapshot)
            except Exception as exc:
                logger.debug(f"Dropping WebSocket client: {exc}")
                disconnected.append(connection)

        for connection in disconnected:
            if connection in self.active_connections:
                self.active_connections.remove(connection)

    def _build_uvicorn_server(self) -> Any:
        import uvicorn

        config = uvicorn.Config(self.app, host=self.host, port=self.port, log_level="warning")
        self._uvicorn_server = uvicorn.Server(config)
        return self._uvicorn_server

    def run(self) -> None:
        """Serve in the current thread until interrupted."""
        logger.info(f"Serving board at http://{self.host}:{self.port}")
        self._build_uvicorn_server().run()

    def stop(self) -> None:
        """Stop the server."""
        if self._uvicorn_server is not None:
            self._uvicorn_server.should_exit = True
        self.store.unsubscribe(self._on_board_update)

