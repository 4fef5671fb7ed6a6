"""
Simulation session controller.

Owns the lifecycle of one remote simulation and is the only writer of its
SessionState:

    UNINITIALIZED -> INITIALIZING -> READY <-> RUNNING <-> PAUSED
    READY | RUNNING | PAUSED -> STOPPING -> READY
    any -> UNINITIALIZED (reset)

Commands never raise into callers. Every RPC failure (transport, protocol or
success=false) ends up in ``error_message`` with a status line, and the phase
goes back to what it was before the command. Consumers read ``state`` or
subscribe to be handed each new state.

Everything runs on one asyncio loop. State is only mutated between awaits, so
each reaction (command, RPC reply, stream message) applies atomically. At most
one stream task is alive; messages that arrive after the phase has left
RUNNING are dropped.
"""

import asyncio
from contextlib import aclosing
from dataclasses import fields, replace
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from ..config import SimulatorConfig
from ..examples import PREDEFINED_EXAMPLES
from ..hypergraph.projection import VisualGraph, project
from ..hypergraph.state import HypergraphState, SimulationEvent
from ..clients.errors import (
    SimulatorError,
    SimulatorTransportError,
    SimulatorProtocolError,
    SimulatorApplicationError,
)
from ..clients.messages import (
    InitializeRequest,
    StepRequest,
    RunRequest,
    SimulationStateUpdate,
    SaveHypergraphRequest,
    LoadHypergraphRequest,
    PredefinedExampleInfo,
)
from ..clients.transport import SimulatorTransport
from .state import Phase, SessionState


T = TypeVar("T")

Subscriber = Callable[[SessionState], None]


def _require_success(response, default_message: str) -> None:
    if not response.success:
        raise SimulatorApplicationError(response.message or default_message)


def _require_snapshot(snapshot: Optional[HypergraphState], method: str) -> HypergraphState:
    if snapshot is None:
        raise SimulatorProtocolError(f"{method} reported success without a hypergraph state")
    return snapshot


def _failure_status(error: SimulatorError, action: str) -> str:
    if isinstance(error, SimulatorTransportError):
        return "Connection error"
    return f"{action} failed"


class SessionController:
    """State machine driving one remote simulation session."""

    def __init__(self, transport: SimulatorTransport, config: Optional[SimulatorConfig] = None):
        """
        Initialize the controller.

        Args:
            transport: RPC adapter for the simulation service
            config: Session settings; defaults to SimulatorConfig()
        """
        self.transport = transport
        self.config = config or SimulatorConfig()
        self._state = self._initial_state()
        self._subscribers: List[Subscriber] = []

        # Active stream and bookkeeping for the run that opened it
        self._stream_task: Optional[asyncio.Task] = None
        self._stream_origin = Phase.READY
        self._stream_applied = 0

        # Bumped whenever the session is replaced (initialize, load, reset);
        # replies to calls made under an older generation are discarded
        self._epoch = 0

    def _initial_state(self, selected_example: Optional[str] = None,
                       update_interval_ms: Optional[int] = None) -> SessionState:
        return SessionState(
            selected_example=selected_example or self.config.default_example,
            update_interval_ms=update_interval_ms or self.config.update_interval_ms,
        )

    # ------------------------------------------------------------------
    # State access and observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def has_active_stream(self) -> bool:
        return self._stream_task is not None and not self._stream_task.done()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback run with every new state. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def project(self) -> VisualGraph:
        """Visual graph of the current snapshot."""
        return project(self._state.hypergraph_state)

    def _set(self, **changes) -> None:
        previous = self._state.phase
        self._state = replace(self._state, **changes)
        if self._state.phase is not previous:
            print(f"[SESSION] {previous.value} -> {self._state.phase.value}", flush=True)
        for callback in list(self._subscribers):
            try:
                callback(self._state)
            except Exception as e:
                print(f"[SESSION] Subscriber {callback!r} failed: {e}", flush=True)

    def _reject(self, message: str, **changes) -> SessionState:
        print(f"[SESSION] Rejected: {message}", flush=True)
        self._set(status_message=message, **changes)
        return self._state

    def _fail(self, error: SimulatorError, action: str, **changes) -> SessionState:
        print(f"[SESSION] {action} failed ({error.kind}): {error}", flush=True)
        self._set(
            is_loading=False,
            error_message=str(error),
            status_message=_failure_status(error, action),
            **changes,
        )
        return self._state

    def _extend_history(self, events: Sequence[SimulationEvent]) -> tuple:
        history = self._state.event_history + tuple(events)
        return history[-self.config.history_cap:]

    def _check_step(self, step_number: int) -> None:
        current = self._state.current_step_number
        if step_number < current:
            raise SimulatorProtocolError(
                f"Step number went backwards ({current} -> {step_number})"
            )

    async def _call(self, method: str, awaitable: Awaitable[T]) -> T:
        """Await an RPC, folding adapter bugs into transport errors."""
        print(f"[RPC] {method}", flush=True)
        try:
            return await awaitable
        except SimulatorError:
            raise
        except Exception as e:
            raise SimulatorTransportError(f"{method} failed: {e}") from e

    def _is_stale(self, epoch: int, method: str) -> bool:
        if epoch != self._epoch:
            print(f"[SESSION] Discarding {method} reply from a replaced session", flush=True)
            return True
        return False

    def _settled_phase(self) -> Phase:
        """Phase to fall back to if a session-replacing command fails."""
        phase = self._state.phase
        # A cancelled run cannot be resumed as RUNNING without a stream
        if phase is Phase.RUNNING:
            return Phase.PAUSED
        if phase is Phase.INITIALIZING:
            return Phase.READY if self._state.hypergraph_state is not None else Phase.UNINITIALIZED
        if phase is Phase.STOPPING:
            return Phase.READY
        return phase

    def _next_epoch(self) -> int:
        self._epoch += 1
        return self._epoch

    def _replace_session(self, snapshot: HypergraphState, message: str) -> None:
        self._set(
            phase=Phase.READY,
            hypergraph_state=snapshot,
            current_step_number=snapshot.step_number,
            recent_events=(),
            event_history=(),
            status_message=message,
            error_message=None,
            is_loading=False,
        )

    # ------------------------------------------------------------------
    # Lifecycle commands
    # ------------------------------------------------------------------

    async def initialize(
        self,
        config_id: Optional[str] = None,
        *,
        initial_state: Optional[HypergraphState] = None,
        rule_ids: Optional[Sequence[str]] = None,
    ) -> SessionState:
        """
        Start a fresh simulation from a predefined configuration or a supplied hypergraph.

        Args:
            config_id: Predefined configuration id; defaults to the selected example
            initial_state: Raw hypergraph to start from (exclusive with config_id)
            rule_ids: Optional allow-list of rule ids the engine may apply

        Returns:
            The resulting session state
        """
        if config_id is not None and initial_state is not None:
            self._set(
                error_message="Pass either a configuration id or an initial hypergraph, not both",
                status_message="Initialization failed",
            )
            return self._state

        if initial_state is None and not config_id:
            config_id = self._state.selected_example
            if not config_id:
                self._set(
                    error_message="No initial configuration selected",
                    status_message="Initialization failed",
                )
                return self._state

        request = InitializeRequest(
            predefined_initial_state_id=None if initial_state is not None else config_id,
            initial_hypergraph=initial_state,
            rule_ids_to_use=tuple(rule_ids or ()),
        )

        self._cancel_stream()
        prior = self._settled_phase()
        epoch = self._next_epoch()
        self._set(
            phase=Phase.INITIALIZING,
            is_loading=True,
            error_message=None,
            status_message="Initializing simulation...",
        )

        try:
            response = await self._call("InitializeSimulation", self.transport.initialize(request))
            _require_success(response, "Failed to initialize simulation")
            snapshot = _require_snapshot(response.initial_hypergraph_state, "InitializeSimulation")
        except SimulatorError as e:
            if self._is_stale(epoch, "InitializeSimulation"):
                return self._state
            return self._fail(e, "Initialization", phase=prior)

        if self._is_stale(epoch, "InitializeSimulation"):
            return self._state
        self._replace_session(snapshot, response.message or "Simulation initialized")
        return self._state

    async def step(self, num_steps: int = 1) -> SessionState:
        """Apply exactly ``num_steps`` rewrites. Only valid while READY."""
        phase = self._state.phase
        if phase is Phase.RUNNING:
            return self._reject("Cannot step while the simulation is running")
        if phase is not Phase.READY:
            return self._reject(f"Cannot step while {phase.value}")
        if num_steps < 1:
            return self._reject(
                "Step rejected",
                error_message=f"Step count must be at least 1, got {num_steps}",
            )

        epoch = self._epoch
        self._set(
            is_loading=True,
            error_message=None,
            status_message="Executing step..." if num_steps == 1 else f"Executing {num_steps} steps...",
        )

        try:
            response = await self._call(
                "StepSimulation", self.transport.step(StepRequest(num_steps=num_steps))
            )
            _require_success(response, "Step execution failed")
            snapshot = _require_snapshot(response.new_hypergraph_state, "StepSimulation")
            self._check_step(response.current_step_number)
        except SimulatorError as e:
            if self._is_stale(epoch, "StepSimulation"):
                return self._state
            return self._fail(e, "Step")

        if self._is_stale(epoch, "StepSimulation"):
            return self._state

        events = response.events_occurred
        self._set(
            hypergraph_state=snapshot,
            current_step_number=response.current_step_number,
            recent_events=tuple(events),
            event_history=self._extend_history(events),
            status_message=response.message or f"Step {response.current_step_number} completed",
            is_loading=False,
        )
        return self._state

    async def run(self) -> SessionState:
        """Open the update stream and move to RUNNING. Valid from READY or PAUSED."""
        phase = self._state.phase
        if phase not in (Phase.READY, Phase.PAUSED):
            return self._reject(f"Cannot run while {phase.value}")

        # Never two streams at once
        self._cancel_stream()

        request = RunRequest(
            update_interval_ms=self._state.update_interval_ms,
            max_steps=self.config.max_steps,
            stop_on_fixed_point=self.config.stop_on_fixed_point,
        )
        self._stream_origin = phase
        self._stream_applied = 0
        self._set(phase=Phase.RUNNING, error_message=None, status_message="Running simulation...")

        print(f"[STREAM] Opening RunSimulation (interval={request.update_interval_ms}ms)", flush=True)
        self._stream_task = asyncio.create_task(self._consume_stream(request))
        return self._state

    def pause(self) -> SessionState:
        """Close the update stream and move to PAUSED. Only valid while RUNNING."""
        if self._state.phase is not Phase.RUNNING:
            return self._reject("Cannot pause: simulation is not running")
        self._cancel_stream()
        self._set(phase=Phase.PAUSED, status_message="Simulation paused")
        return self._state

    async def stop(self) -> SessionState:
        """Close the stream, ask the server to stop, and end up READY whatever it answers."""
        phase = self._state.phase
        if phase not in (Phase.RUNNING, Phase.PAUSED):
            return self._reject(f"Cannot stop while {phase.value}")

        self._cancel_stream()
        epoch = self._epoch
        self._set(phase=Phase.STOPPING, is_loading=True, status_message="Stopping simulation...")

        try:
            response = await self._call("StopSimulation", self.transport.stop())
            _require_success(response, "Error stopping simulation")
            final_state = response.final_state
            if final_state is not None:
                self._check_step(final_state.step_number)
        except SimulatorError as e:
            if self._is_stale(epoch, "StopSimulation"):
                return self._state
            return self._fail(e, "Stop", phase=Phase.READY)

        if self._is_stale(epoch, "StopSimulation"):
            return self._state

        changes = {}
        if final_state is not None:
            changes = dict(
                hypergraph_state=final_state,
                current_step_number=final_state.step_number,
            )
        self._set(
            phase=Phase.READY,
            is_loading=False,
            status_message=response.message or "Simulation stopped",
            **changes,
        )
        return self._state

    def reset(self) -> SessionState:
        """Drop everything and return to UNINITIALIZED. Valid from any phase."""
        self._cancel_stream()
        self._next_epoch()
        print("[SESSION] Reset", flush=True)
        fresh = self._initial_state(self._state.selected_example, self._state.update_interval_ms)
        self._set(**{f.name: getattr(fresh, f.name) for f in fields(fresh)})
        return self._state

    # ------------------------------------------------------------------
    # Persistence and queries
    # ------------------------------------------------------------------

    async def save_snapshot(
        self,
        filename: Optional[str] = None,
        *,
        overwrite: bool = False,
        pretty_print: bool = True,
    ) -> SessionState:
        """Ask the server to save its current hypergraph. Session state is not changed."""
        request = SaveHypergraphRequest(
            filename=filename or None,
            overwrite_existing=overwrite,
            pretty_print=pretty_print,
        )
        epoch = self._epoch
        self._set(is_loading=True, error_message=None, status_message="Saving hypergraph...")

        try:
            response = await self._call("SaveHypergraph", self.transport.save_hypergraph(request))
            _require_success(response, "Save failed")
        except SimulatorError as e:
            if self._is_stale(epoch, "SaveHypergraph"):
                return self._state
            return self._fail(e, "Save")

        if self._is_stale(epoch, "SaveHypergraph"):
            return self._state
        self._set(
            is_loading=False,
            status_message=f"Saved to {response.file_path or filename or 'file'}",
        )
        return self._state

    async def load_snapshot(
        self,
        *,
        example_name: Optional[str] = None,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> SessionState:
        """Replace the session with a hypergraph loaded from exactly one source."""
        sources = [s for s in (example_name, content, file_path) if s is not None]
        if len(sources) != 1:
            self._set(
                error_message="Exactly one of example name, content or file path is required",
                status_message="Load failed",
            )
            return self._state

        request = LoadHypergraphRequest(
            predefined_example_name=example_name,
            file_content=content,
            file_path=file_path,
        )

        self._cancel_stream()
        prior = self._settled_phase()
        epoch = self._next_epoch()
        self._set(
            phase=Phase.INITIALIZING,
            is_loading=True,
            error_message=None,
            status_message="Loading hypergraph...",
        )

        try:
            response = await self._call("LoadHypergraph", self.transport.load_hypergraph(request))
            _require_success(response, "Failed to load hypergraph")
            snapshot = _require_snapshot(response.loaded_state, "LoadHypergraph")
        except SimulatorError as e:
            if self._is_stale(epoch, "LoadHypergraph"):
                return self._state
            return self._fail(e, "Load", phase=prior)

        if self._is_stale(epoch, "LoadHypergraph"):
            return self._state
        self._replace_session(snapshot, response.message or "Hypergraph loaded")
        return self._state

    async def refresh(self) -> SessionState:
        """Re-read the server's current snapshot. Valid from READY or PAUSED."""
        phase = self._state.phase
        if phase not in (Phase.READY, Phase.PAUSED):
            return self._reject(f"Cannot refresh while {phase.value}")

        epoch = self._epoch
        self._set(is_loading=True, error_message=None, status_message="Fetching current state...")

        try:
            update = await self._call("GetCurrentState", self.transport.get_current_state())
            self._check_step(update.step_number)
        except SimulatorError as e:
            if self._is_stale(epoch, "GetCurrentState"):
                return self._state
            return self._fail(e, "Refresh")

        if self._is_stale(epoch, "GetCurrentState"):
            return self._state
        self._set(
            hypergraph_state=update.current_graph,
            current_step_number=update.step_number,
            status_message=update.status_message or f"Step {update.step_number}",
            is_loading=False,
        )
        return self._state

    async def list_examples(self) -> List[PredefinedExampleInfo]:
        """Predefined configurations offered by the server, or the built-in catalog on failure."""
        try:
            response = await self._call("ListPredefinedExamples", self.transport.list_examples())
        except SimulatorError as e:
            print(f"[SESSION] Falling back to built-in example catalog: {e}", flush=True)
            self._set(error_message=str(e))
            return list(PREDEFINED_EXAMPLES)
        return list(response.examples)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def set_selected_example(self, example_id: str) -> SessionState:
        self._set(selected_example=example_id)
        return self._state

    def set_update_interval(self, interval_ms: int) -> SessionState:
        """Interval used by the next run(); an open stream keeps its own."""
        if interval_ms <= 0:
            self._set(error_message=f"Update interval must be positive, got {interval_ms}")
            return self._state
        self._set(update_interval_ms=interval_ms)
        return self._state

    def clear_error(self) -> SessionState:
        self._set(error_message=None)
        return self._state

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    def handle_stream_update(self, update: SimulationStateUpdate) -> bool:
        """
        Apply one RunSimulation message.

        Messages are only applied while RUNNING; anything that arrives after a
        pause/stop/reset is dropped. A step number lower than the current one
        means the stream is out of sync: the stream is closed and the session
        moves to PAUSED with an error.

        Returns:
            True if the message was applied
        """
        state = self._state
        if state.phase is not Phase.RUNNING:
            print(
                f"[STREAM] Dropped update for step {update.step_number} (phase={state.phase.value})",
                flush=True,
            )
            return False

        try:
            self._check_step(update.step_number)
        except SimulatorProtocolError as e:
            print(f"[STREAM] Desynchronized: {e}", flush=True)
            self._cancel_stream()
            self._set(
                phase=Phase.PAUSED,
                error_message=f"Stream desynchronized: {e}",
                status_message="Simulation paused: stream out of sync",
            )
            return False

        events = update.recent_events
        self._stream_applied += 1
        self._set(
            hypergraph_state=update.current_graph,
            current_step_number=update.step_number,
            recent_events=tuple(events),
            event_history=self._extend_history(events),
            status_message=update.status_message or f"Step {update.step_number} - Running",
        )
        return True

    async def _consume_stream(self, request: RunRequest) -> None:
        task = asyncio.current_task()
        try:
            async with aclosing(self.transport.run(request)) as stream:
                async for update in stream:
                    if self._stream_task is not task:
                        break
                    self.handle_stream_update(update)
                    if self._stream_task is not task:
                        break
        except asyncio.CancelledError:
            print("[STREAM] Closed", flush=True)
            raise
        except Exception as e:
            if not isinstance(e, SimulatorError):
                e = SimulatorTransportError(f"RunSimulation stream failed: {e}")
            self._on_stream_error(task, e)
            return
        self._on_stream_end(task)

    def _on_stream_error(self, task: Optional[asyncio.Task], error: SimulatorError) -> None:
        if self._stream_task is not task:
            return
        self._stream_task = None
        if self._state.phase is not Phase.RUNNING:
            return
        # Nothing applied yet: the run never started, so undo the transition
        phase = self._stream_origin if self._stream_applied == 0 else Phase.PAUSED
        self._fail(error, "Run", phase=phase)

    def _on_stream_end(self, task: Optional[asyncio.Task]) -> None:
        if self._stream_task is not task:
            return
        self._stream_task = None
        if self._state.phase is not Phase.RUNNING:
            return
        print("[STREAM] Server ended the run", flush=True)
        self._set(
            phase=Phase.READY,
            status_message=f"Simulation finished at step {self._state.current_step_number}",
        )

    def _cancel_stream(self) -> None:
        task, self._stream_task = self._stream_task, None
        if task is None or task.done():
            return
        # From inside the stream task the loop exits on its own once the handle is cleared
        if task is asyncio.current_task():
            return
        print("[STREAM] Cancelling active stream", flush=True)
        task.cancel()

    async def aclose(self) -> None:
        """Cancel any stream and release the transport."""
        task = self._stream_task
        self._cancel_stream()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        await self.transport.aclose()
