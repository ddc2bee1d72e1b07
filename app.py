from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from routers.rooms import rooms_router
from registry import RoomRegistry
from gateway import Envelope, SessionGateway
from schemas.messages import parse_intent
from exceptions import InvalidIntent
import uuid
import json
import asyncio
from typing import Dict, Iterable, Optional
from constants import CORS_ORIGINS, LOG_LEVEL, LOG_FILE
from logging_config import get_logger, setup_logging

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


class ConnectionManager:
    """Tracks live WebSocket connections and delivers gateway envelopes to them.

    Each connection owns an outbound queue drained by its own sender task.
    Enqueueing never waits, so a handler can queue a whole broadcast before
    the next intent for the same room is looked at.
    """

    def __init__(self):
        # Format: {connection_id: websocket}
        self.connections: Dict[str, WebSocket] = {}
        # Format: {connection_id: queue of outbound dicts, None closes the sender}
        self.outboxes: Dict[str, asyncio.Queue] = {}
        self.sender_tasks: Dict[str, asyncio.Task] = {}

    def register(self, connection_id: str, websocket: WebSocket):
        outbox: asyncio.Queue = asyncio.Queue()
        self.connections[connection_id] = websocket
        self.outboxes[connection_id] = outbox
        self.sender_tasks[connection_id] = asyncio.create_task(self._drain(connection_id, websocket, outbox))
        logger.debug(f"Registered connection {connection_id} (live connections: {len(self.connections)})")

    async def unregister(self, connection_id: str):
        self.connections.pop(connection_id, None)
        outbox = self.outboxes.pop(connection_id, None)
        task = self.sender_tasks.pop(connection_id, None)
        if outbox is not None:
            outbox.put_nowait(None)
        if task is not None:
            # Cancelling the caller still propagates; the sender outcome is not re-raised
            await asyncio.wait({task})
        logger.debug(f"Unregistered connection {connection_id} (live connections: {len(self.connections)})")

    def deliver(self, envelopes: Iterable[Envelope]):
        for envelope in envelopes:
            payload = envelope.message.to_dict()
            for connection_id in envelope.recipients:
                outbox = self.outboxes.get(connection_id)
                if outbox is None:
                    logger.debug(f"Dropping {payload['type']} for closed connection {connection_id}")
                    continue
                outbox.put_nowait(payload)

    async def _drain(self, connection_id: str, websocket: WebSocket, outbox: asyncio.Queue):
        while True:
            payload = await outbox.get()
            if payload is None:
                break
            try:
                await websocket.send_text(json.dumps(payload))
                logger.debug(f"Sent {payload['type']} to connection {connection_id}")
            except Exception as e:
                # The receive loop notices the closed socket and cleans up
                logger.warning(f"Error sending {payload['type']} to connection {connection_id}: {e}")
                break


def create_app(registry: Optional[RoomRegistry] = None) -> FastAPI:
    registry = registry or RoomRegistry()
    gateway = SessionGateway(registry)
    manager = ConnectionManager()

    app = FastAPI(title="Tic-Tac-Toe Rooms")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.registry = registry
    app.state.gateway = gateway
    app.state.connections = manager

    app.include_router(rooms_router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Game WebSocket.

        Inbound frames are JSON intents (``join``, ``play``, ``reset``); outbound
        frames are ``joined``, ``full``, ``state`` and ``gameOver`` messages.
        """
        await websocket.accept()
        connection_id = str(uuid.uuid4())
        logger.info(f"WebSocket connection accepted: {connection_id}")

        session = gateway.connect(connection_id)
        manager.register(connection_id, websocket)

        try:
            message_count = 0
            while True:
                data = await websocket.receive_text()
                message_count += 1
                logger.debug(f"Received message #{message_count} from connection {connection_id}")

                try:
                    intent = parse_intent(data)
                except InvalidIntent as e:
                    logger.warning(f"Dropping invalid frame from connection {connection_id}: {e}")
                    continue

                manager.deliver(gateway.dispatch(session, intent))

        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected normally for connection {connection_id}")
        except Exception as e:
            logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
        finally:
            room_id = session.room_id
            manager.deliver(gateway.disconnect(session))
            await manager.unregister(connection_id)
            logger.info(f"Connection {connection_id} closed (room: {room_id or '-'})")

    logger.info("FastAPI application initialized")
    return app


app = create_app()
