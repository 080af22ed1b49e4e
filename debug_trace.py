"""
debug_trace.py

Debug instrumentation for following gestures through the editor.
Enable by setting JOINT_CANVAS_TRACE=1 in the environment.

Each drag or path gesture gets a trace id; its lines are prefixed with
``[g<id>]`` so interleaved output from press, move ticks and release can be
read back per gesture, and the closing line reports how long it lasted.
"""

import itertools
import os
import sys
import time
import traceback
from datetime import datetime

# Set JOINT_CANVAS_TRACE=1 to enable debug tracing
DEBUG_TRACE = os.environ.get("JOINT_CANVAS_TRACE", "") == "1"

# Set JOINT_CANVAS_TRACE_MOVES=1 to trace every move tick (very verbose)
TRACE_MOVES = os.environ.get("JOINT_CANVAS_TRACE_MOVES", "") == "1"

# Log file (None for stderr only)
LOG_FILE = os.environ.get("JOINT_CANVAS_TRACE_FILE") or None

_log_file = None

# Open gestures: trace id -> (label, perf_counter at begin)
_gestures = {}
_gesture_ids = itertools.count(1)


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            _log_file = open(LOG_FILE, "w", encoding="utf-8")
        except OSError:
            pass
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Print a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "MOVE" and not TRACE_MOVES:
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


def begin_gesture(label: str) -> int:
    """Open a traced gesture and return its id.

    Ids are handed out even with tracing off so sessions always carry one.
    """
    gesture_id = next(_gesture_ids)
    if DEBUG_TRACE:
        _gestures[gesture_id] = (label, time.perf_counter())
        trace(f"[g{gesture_id}] begin {label}", "GESTURE")
    return gesture_id


def trace_gesture(gesture_id: int, msg: str, category: str = "GESTURE"):
    """Trace a line belonging to an open gesture (use "MOVE" for ticks)."""
    trace(f"[g{gesture_id}] {msg}", category)


def end_gesture(gesture_id: int, msg: str):
    """Close a traced gesture, reporting its duration."""
    opened = _gestures.pop(gesture_id, None)
    if opened is None:
        trace_gesture(gesture_id, f"end: {msg}")
        return
    label, started = opened
    elapsed_ms = (time.perf_counter() - started) * 1000
    trace(f"[g{gesture_id}] end {label}: {msg} ({elapsed_ms:.0f} ms)", "GESTURE")


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
