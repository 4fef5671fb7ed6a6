"""WebSocket endpoints."""

import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.services import get_controller, session_connections, session_payload

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/simulation")
async def simulation_websocket(websocket: WebSocket):
    """WebSocket for live session updates."""
    await websocket.accept()
    session_connections.append(websocket)
    print(f"[WS] Client connected. Total clients: {len(session_connections)}", flush=True)

    try:
        # Send initial session state
        controller = get_controller()
        if controller:
            await websocket.send_json(session_payload(controller.state, "initial"))

        # Keep connection alive and handle any incoming messages
        while True:
            try:
                # Wait for messages (mainly for keepalive pings)
                data = await asyncio.wait_for(websocket.receive_text(), timeout=30)
                if data == "ping":
                    await websocket.send_text("pong")
            except asyncio.TimeoutError:
                # Send ping to check connection
                await websocket.send_text("ping")

    except WebSocketDisconnect:
        pass
    finally:
        if websocket in session_connections:
            session_connections.remove(websocket)
        print(f"[WS] Client disconnected. Total clients: {len(session_connections)}", flush=True)
