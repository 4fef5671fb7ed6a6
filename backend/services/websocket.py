"""WebSocket notification helpers."""

import asyncio

from wolfram_sim import SessionState, project

from .state import session_connections, pending_notifications


def session_payload(state: SessionState, message_type: str = "update") -> dict:
    """Message pushed to UI clients: the state plus its projected graph."""
    graph = project(state.hypergraph_state).to_dict()
    return {"type": message_type, "state": state.to_dict(), "graph": graph}


async def notify_session_update(state: SessionState) -> None:
    """Send a session update to all WebSocket clients."""
    if not session_connections:
        return

    message = session_payload(state)
    disconnected = []
    for websocket in list(session_connections):
        try:
            await websocket.send_json(message)
        except Exception:
            disconnected.append(websocket)

    # Clean up disconnected clients
    for ws in disconnected:
        if ws in session_connections:
            session_connections.remove(ws)
            print(f"[WS NOTIFY] Dropped disconnected client ({len(session_connections)} left)", flush=True)


def on_session_change(state: SessionState) -> None:
    """Controller subscriber: schedule a broadcast on the running loop."""
    if not session_connections:
        return
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        print("[WS NOTIFY] No running event loop, skipping update", flush=True)
        return
    task = loop.create_task(notify_session_update(state))
    pending_notifications.add(task)
    task.add_done_callback(pending_notifications.discard)
