"""Storage errors. The only exceptions raised by the planner core."""


class StateStoreError(Exception):
    """Base exception for state persistence failures."""

    def __init__(self, message: str, backend: str = ""):
        self.message = message
        self.backend = backend
        super().__init__(f"[{backend}] {message}" if backend else message)


class StateSchemaError(StateStoreError):
    """Persisted blob cannot be read by this version."""
    pass
