import threading

_PREFIX = "sim-"
_ID_LENGTH = 12

# Monotonic counter shared by every engine in the process
_counter = 0
_counter_lock = threading.Lock()


def new_simulation_id() -> str:
    """Return a process-unique simulation id such as ``sim-00000000002A``."""
    global _counter
    with _counter_lock:
        _counter += 1
        value = _counter

    return f"{_PREFIX}{value:0{_ID_LENGTH}X}"
