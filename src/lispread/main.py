import threading

from lispread import logconfig

_INIT_LOCK = threading.Lock()
_is_initialized = False


def init(force_reload: bool = False) -> None:
    """Initialize lispread package state.

    Installs the package log handler configured from the environment (see
    `lispread.logconfig`). Only the first invocation has any effect unless
    `force_reload=True`."""
    global _is_initialized

    with _INIT_LOCK:
        if _is_initialized and not force_reload:
            return

        logconfig.configure_logger()
        _is_initialized = True
