"""Error types raised at the simulation service boundary."""


class SimulatorError(Exception):
    """Base class for every failure talking to the simulation service."""

    kind = "error"


class SimulatorTransportError(SimulatorError):
    """Raised when an RPC could not complete (connection, HTTP status, broken stream)."""

    kind = "transport"


class SimulatorProtocolError(SimulatorError):
    """Raised when a response is malformed, incomplete, or out of order."""

    kind = "protocol"


class SimulatorApplicationError(SimulatorError):
    """Raised when the service answers with success=false."""

    kind = "application"
