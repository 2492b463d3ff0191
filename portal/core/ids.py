import threading
import time

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_lock = threading.Lock()
_last_stamp = 0


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def generate_id(prefix: str = "id") -> str:
    """
    Demo-grade unique token: "<prefix>_<base36 epoch millis>".
    Strictly increasing within a process; not collision checked across processes.
    """
    global _last_stamp
    with _lock:
        stamp = time.time_ns() // 1_000_000
        if stamp <= _last_stamp:
            stamp = _last_stamp + 1
        _last_stamp = stamp
    return f"{prefix}_{_base36(stamp)}"
