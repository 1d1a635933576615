"""Exceptions for error handling across tapedeck."""


class TapedeckError(Exception):
    """Base exception for tapedeck operations."""

    pass


class StartupError(TapedeckError):
    """Raised when the application cannot start. Always fatal."""

    pass


class MissingCredentialsError(StartupError):
    """Raised when the backend needs credentials that were not supplied."""

    pass


class LoginTimeoutError(StartupError):
    """Raised when the backend session does not reach the logged-in state in time."""

    def __init__(self, timeout: float, message: str = None):
        self.timeout = timeout
        super().__init__(message or f"Could not login (no connection after {timeout:g}s)")


class CacheDirectoryError(StartupError):
    """Raised when the cache directory cannot be resolved or created."""

    pass


class PlayerUnavailableError(StartupError):
    """Raised when the audio player process cannot be started."""

    pass


class QueueFullError(TapedeckError):
    """Raised when the playback queue is at capacity."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Queue is full ({capacity} tracks)")


class OutOfRangeError(TapedeckError, IndexError):
    """Raised when an index does not address an existing element."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range (size {size})")


class BackendError(TapedeckError):
    """Raised when the backend session fails while the player is running."""

    pass
