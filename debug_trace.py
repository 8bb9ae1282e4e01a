"""
debug_trace.py

Debug instrumentation for the ZoneSnap editor window.
Enable by setting the ZONESNAP_TRACE environment variable (e.g. ZONESNAP_TRACE=1).
"""

import os
import sys
import traceback
from datetime import datetime

# Enabled when ZONESNAP_TRACE is set to anything but "", "0" or "false"
DEBUG_TRACE = os.environ.get("ZONESNAP_TRACE", "").lower() not in ("", "0", "false")

# Set ZONESNAP_TRACE_PAINT=1 to trace paint events (very verbose)
TRACE_PAINT = bool(os.environ.get("ZONESNAP_TRACE_PAINT"))

# Log file (None for stderr only)
LOG_FILE = "zonesnap_debug.log"

_log_file = None


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "w", encoding="utf-8")
        except OSError:
            return None
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "PAINT" and not TRACE_PAINT:
        return

    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] [{category}] {msg}"

    print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        try:
            log_file.write(line + "\n")
            log_file.flush()
        except OSError:
            pass


def trace_exception(msg: str = "Exception"):
    """Print exception info."""
    if not DEBUG_TRACE:
        return
    trace(f"{msg}: {traceback.format_exc()}", "ERROR")


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None
