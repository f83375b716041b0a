"""Sampling engine errors."""


class EngineDisposedError(RuntimeError):
    """Raised when a disposed MonitoringService is used."""

    def __init__(self, message: str = "engine disposed"):
        super().__init__(message)
