"""Transform counters."""

import threading
from dataclasses import dataclass, field, fields
from typing import Optional

from prometheus_client import CollectorRegistry, Counter


@dataclass
class TransformMetrics:
    """Transform pipeline counters."""

    batches: int = 0
    filtered: int = 0
    serialize_total: int = 0
    serialize_failed: int = 0
    render_failed: int = 0

    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def snapshot(self) -> dict[str, int]:
        """Return a consistent copy of all counters."""
        with self._lock:
            return {f.name: getattr(self, f.name) for f in fields(self) if f.init}


# Exported names follow the prometheus-kafka-adapter conventions.
PROMETHEUS_COUNTERS = {
    "batches": ("incoming_prometheus_batches_total", "Count of incoming Prometheus batches"),
    "filtered": ("objects_filtered_total", "Count of samples filtered out"),
    "serialize_total": ("serialized_total", "Count of samples serialized"),
    "serialize_failed": ("serialized_failed_total", "Count of samples failing to serialize"),
    "render_failed": ("topic_render_failed_total", "Count of samples failing topic rendering"),
}


class PrometheusCounters:
    """Mirror of ``TransformMetrics`` as prometheus_client counters."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.counters: dict[str, Counter] = {
            key: Counter(name, documentation, registry=self.registry)
            for key, (name, documentation) in PROMETHEUS_COUNTERS.items()
        }

    def increment(self, name: str, amount: int = 1) -> None:
        self.counters[name].inc(amount)

    def unregister(self) -> None:
        """Remove all counters from the registry."""
        for counter in self.counters.values():
            self.registry.unregister(counter)
        self.counters = {}
