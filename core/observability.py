"""Observability for the AI services.

Configures process logging from LOG_LEVEL and keeps per-service call
statistics. Each traced call records which model served it, how long it
took, whether it raised, and whether the service had to fall back to
canned output instead of a model answer.
"""
import time
import inspect
import logging
import functools
from contextvars import ContextVar
from typing import Dict, Any, Optional, Callable, List
from dataclasses import dataclass, field

from config.settings import LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger("neuralink")

_active_trace: ContextVar[Optional["ServiceTrace"]] = ContextVar("active_trace", default=None)


@dataclass
class ServiceTrace:
    """One call into a service method."""
    service_name: str
    model_name: Optional[str] = None
    input_summary: str = ""
    started_at: float = field(default_factory=time.perf_counter)
    duration_ms: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    fallback_used: bool = False

    def finish(self, error: Optional[BaseException] = None) -> None:
        self.duration_ms = (time.perf_counter() - self.started_at) * 1000
        self.success = error is None
        self.error = str(error) if error is not None else None


@dataclass
class ServiceStats:
    calls: int = 0
    failures: int = 0
    fallbacks: int = 0
    latencies_ms: List[float] = field(default_factory=list)
    models: List[str] = field(default_factory=list)

    @property
    def avg_latency_ms(self) -> float:
        return sum(self.latencies_ms) / len(self.latencies_ms) if self.latencies_ms else 0.0


@dataclass
class ServiceMetrics:
    """Call statistics keyed by service name."""
    services: Dict[str, ServiceStats] = field(default_factory=dict)

    @property
    def total_requests(self) -> int:
        return sum(s.calls for s in self.services.values())

    @property
    def failed_requests(self) -> int:
        return sum(s.failures for s in self.services.values())

    @property
    def fallback_requests(self) -> int:
        return sum(s.fallbacks for s in self.services.values())

    @property
    def success_rate(self) -> float:
        total = self.total_requests
        return (total - self.failed_requests) / total if total else 0.0

    @property
    def avg_latency_ms(self) -> float:
        latencies = [ms for s in self.services.values() for ms in s.latencies_ms]
        return sum(latencies) / len(latencies) if latencies else 0.0

    def record(self, trace: ServiceTrace) -> None:
        stats = self.services.setdefault(trace.service_name, ServiceStats())
        stats.calls += 1
        if not trace.success:
            stats.failures += 1
        if trace.fallback_used:
            stats.fallbacks += 1
        if trace.duration_ms is not None:
            stats.latencies_ms.append(trace.duration_ms)
        if trace.model_name and trace.model_name not in stats.models:
            stats.models.append(trace.model_name)

    def reset(self) -> None:
        self.services = {}

    def summary(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "success_rate": f"{self.success_rate:.1%}",
            "fallbacks": self.fallback_requests,
            "avg_latency_ms": f"{self.avg_latency_ms:.0f}ms",
            "services": {
                name: {
                    "calls": stats.calls,
                    "failures": stats.failures,
                    "fallbacks": stats.fallbacks,
                    "avg_latency_ms": round(stats.avg_latency_ms),
                    "models": list(stats.models),
                }
                for name, stats in self.services.items()
            },
        }


metrics = ServiceMetrics()


class Tracer:
    """Context manager that times a service call and records it in `metrics`.

    While active, the trace is reachable through `mark_fallback()` so the
    service body can flag degraded answers without passing the trace around.
    """

    def __init__(self, service_name: str, input_data: Any = None, model_name: Optional[str] = None):
        self.trace = ServiceTrace(service_name=service_name, model_name=model_name)
        if input_data:
            self.trace.input_summary = str(input_data)[:200]
        self._token = None

    def __enter__(self) -> ServiceTrace:
        self._token = _active_trace.set(self.trace)
        logger.info(f"▶ {self.trace.service_name} ({self.trace.model_name or 'no model'})")
        return self.trace

    def __exit__(self, exc_type, exc_val, exc_tb):
        _active_trace.reset(self._token)
        self.trace.finish(exc_val)
        if exc_type:
            logger.error(f"✖ {self.trace.service_name} failed: {exc_val}")
        elif self.trace.fallback_used:
            logger.warning(f"↺ {self.trace.service_name} fell back in {self.trace.duration_ms:.0f}ms")
        else:
            logger.info(f"✔ {self.trace.service_name} completed in {self.trace.duration_ms:.0f}ms")

        metrics.record(self.trace)
        return False


def mark_fallback() -> None:
    """Flag the current traced call as answered by fallback content."""
    trace = _active_trace.get()
    if trace is not None:
        trace.fallback_used = True


def trace_service(func: Callable) -> Callable:
    """Trace a service coroutine as `Class.method`, tagged with the instance's model_name."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"trace_service expects a coroutine function, got {func!r}")

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        name = f"{self.__class__.__name__}.{func.__name__}"
        with Tracer(name, args[0] if args else None, getattr(self, "model_name", None)):
            return await func(self, *args, **kwargs)
    return wrapper


def elapsed_ms(start: float) -> int:
    """Milliseconds since a time.perf_counter() reading."""
    return int((time.perf_counter() - start) * 1000)


def get_metrics_summary() -> Dict[str, Any]:
    return metrics.summary()
