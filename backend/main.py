"""
FastAPI backend for the hypergraph simulation viewer.

Owns one SessionController and exposes its commands over HTTP and its state
over a WebSocket.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wolfram_sim import HttpSimulatorClient, SessionController, SimulatorConfig

from backend.routes import simulation_router, websocket_router
from backend.services import get_controller, set_controller, on_session_change, session_connections


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the session controller on startup and release it on shutdown."""
    controller = get_controller()
    if controller is None:
        config = SimulatorConfig.from_env()
        controller = SessionController(HttpSimulatorClient.from_config(config), config)
        set_controller(controller)
        print(f"[SERVER] Simulation service at {config.server_url}", flush=True)

    unsubscribe = controller.subscribe(on_session_change)

    yield

    # Cleanup on shutdown
    unsubscribe()
    await controller.aclose()
    set_controller(None)
    print("[SERVER] Session controller closed", flush=True)


app = FastAPI(
    title="Hypergraph Simulation API",
    description="Drive a remote hypergraph rewriting simulation and watch its structure",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(simulation_router)
app.include_router(websocket_router)


@app.get("/api/health")
async def health_check() -> dict:
    """Health check endpoint."""
    controller = get_controller()
    return {
        "status": "ok",
        "phase": controller.state.phase.value if controller else None,
        "clients": len(session_connections),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
