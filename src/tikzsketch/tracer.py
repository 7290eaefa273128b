"""
Hierarchical runtime tracing for the sketch-to-TikZ pipeline.

Every stage logs through one tracer: nested, timed spans and one-off
events, written as text lines to stderr and optionally mirrored as JSON
lines and into a log file. Span durations are also accumulated per stage
so a run can end with a timing summary.
"""

import functools
import hashlib
import json
import sys
import time
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime

LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}


class Tracer:
    """
    Span/event tracer.

    Disabled by default; a disabled tracer costs one attribute check per
    call and writes nothing.
    """

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.json_output = False
        self._sink = None
        self._depth = 0
        self._span_stack = []
        self.timings = defaultdict(float)

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Apply settings, reopening the log file if one is given."""
        self.close()
        self.enabled = enabled
        self.level = level.upper()
        self.json_output = json_output
        self.timings.clear()
        if enabled and file_path:
            self._sink = open(file_path, "w", encoding="utf-8")

    def close(self):
        if self._sink:
            self._sink.close()
            self._sink = None

    def wants(self, level):
        """Whether a record at this level would be written."""
        return self.enabled and LEVELS.get(level, 2) <= LEVELS.get(self.level, 2)

    def _emit(self, level, location, message, meta=None):
        if not self.wants(level):
            return

        now = datetime.now()
        record = {
            "timestamp": now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}",
            "level": level,
            "depth": self._depth,
            "location": location,
            "message": message,
        }

        lines = [
            f"{record['timestamp']} {level:<5} {'  ' * self._depth}{location}  {message}",
        ]
        if self.json_output:
            record["meta"] = {k: summarize(v) for k, v in (meta or {}).items()}
            lines.append(json.dumps(record))

        for line in lines:
            print(line, file=sys.stderr)
            if self._sink:
                self._sink.write(line + "\n")
        if self._sink:
            self._sink.flush()

    def _location(self):
        if not self._span_stack:
            return ""
        name, module, _ = self._span_stack[-1]
        return f"{module}:{name}" if module else name

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Timed, nested section of work.

        On an exception the span is closed, the failure logged at ERROR and
        the exception re-raised.
        """
        if not self.enabled:
            yield
            return

        location = f"{module}:{name}" if module else name
        details = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        self._emit("INFO", location, f"start {details}".strip())

        started = time.perf_counter()
        self._span_stack.append((name, module, started))
        self._depth += 1
        failed = None

        try:
            yield
        except Exception as e:
            failed = e
            raise
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._depth -= 1
            self._span_stack.pop()
            self.timings[location] += elapsed_ms
            if failed is None:
                self._emit("INFO", location, f"end ok dt={elapsed_ms:.0f}ms")
            else:
                error = f"{type(failed).__name__}: {str(failed)[:100]}"
                self._emit("ERROR", location, f"failed dt={elapsed_ms:.0f}ms error={error}")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event inside the innermost open span."""
        if not self.wants(level):
            return
        details = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        self._emit(level, self._location(), f"{message} {details}".strip(), meta)

    def timing_summary(self, top=5):
        """The slowest spans so far as "location=12ms" text."""
        slowest = sorted(self.timings.items(), key=lambda item: -item[1])[:top]
        return ", ".join(f"{location}={ms:.0f}ms" for location, ms in slowest)


def _short_hash(data):
    return hashlib.md5(data).hexdigest()[:8]


def _summarize_graph(obj):
    return f"{type(obj).__name__}(nodes={obj.number_of_nodes()},edges={obj.number_of_edges()})"


def _summarize_model(obj):
    fields = list(type(obj).model_fields)[:3]
    return f"{type(obj).__name__}(fields={fields}...)"


def _summarize_builtin(obj):
    if isinstance(obj, str):
        return repr(obj) if len(obj) <= 50 else f"str(len={len(obj)},h={_short_hash(obj.encode())})"
    if isinstance(obj, bytes):
        return f"bytes(len={len(obj)},h={_short_hash(obj)})"
    if isinstance(obj, (list, tuple)):
        first = f",first={type(obj[0]).__name__}" if obj else ""
        return f"{type(obj).__name__}(len={len(obj)}{first})"
    if isinstance(obj, dict):
        keys = ",".join(str(k) for k in list(obj)[:5])
        return f"dict(len={len(obj)},keys=[{keys}])"
    if isinstance(obj, (int, float)):
        return str(obj)
    return None


def _formatters():
    import networkx as nx
    from pydantic import BaseModel

    return [
        (nx.Graph, _summarize_graph),
        (BaseModel, _summarize_model),
    ]


def summarize(obj, max_len=200):
    """
    Compact, length-capped description of an object for log lines.

    Understands networkx graphs, pydantic models, strings, bytes,
    containers and numbers.
    """
    if obj is None:
        return "None"

    try:
        text = None
        for kind, formatter in _formatters():
            if isinstance(obj, kind):
                text = formatter(obj)
                break
        if text is None:
            text = _summarize_builtin(obj) or f"<{type(obj).__name__}>"
    except Exception:
        text = f"<{type(obj).__name__}>"

    return text if len(text) <= max_len else text[:max_len - 3] + "..."


def trace(label=None, arg_names=None):
    """
    Decorator running the function inside a span named after it.

    arg_names lists keyword arguments to summarize on the span's start line.
    """
    def decorator(func):
        module = func.__module__.rsplit(".", 1)[-1] if func.__module__ else ""
        name = label or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.enabled:
                return func(*args, **kwargs)
            meta = {k: kwargs[k] for k in (arg_names or ()) if k in kwargs}
            with _tracer.span(name, module=module, **meta):
                return func(*args, **kwargs)

        return wrapper
    return decorator


_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.configure(enabled=enabled, level=level, file_path=file_path, json_output=json_output)
