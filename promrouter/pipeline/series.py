"""Decoded remote-write time series.

The transform pipelines consume ``TimeSeries``: ordered label pairs plus
ordered ``(timestamp_ms, value)`` points, as produced by a Prometheus
remote-write decoder.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

METRIC_NAME_LABEL = "__name__"


@dataclass(frozen=True)
class Sample:
    """One point of a time series."""

    timestamp: int
    value: float


@dataclass(frozen=True)
class TimeSeries:
    """A label set with its points."""

    labels: tuple[tuple[str, str], ...]
    samples: tuple[Sample, ...] = field(default_factory=tuple)

    def label_map(self) -> dict[str, str]:
        """Flatten the label pairs into a fresh mapping; later duplicates win."""
        return {name: value for name, value in self.labels}

    @property
    def metric_name(self) -> str:
        for name, value in reversed(self.labels):
            if name == METRIC_NAME_LABEL:
                return value
        return ""


def series_from_write_request(write_request: Any) -> list[TimeSeries]:
    """Extract time series from a decoded remote-write request.

    Accepts any object shaped like the Prometheus ``WriteRequest`` protobuf
    message: ``.timeseries[].labels[].name/.value`` and
    ``.timeseries[].samples[].timestamp/.value``.

    Args:
        write_request: Decoded write request

    Returns:
        List[TimeSeries]: One entry per time series, in request order

    Example:
        >>> series = series_from_write_request(write_request)
        >>> print(series[0].metric_name, len(series[0].samples))
    """
    return [
        TimeSeries(
            labels=tuple((label.name, label.value) for label in ts.labels),
            samples=tuple(Sample(sample.timestamp, sample.value) for sample in ts.samples),
        )
        for ts in write_request.timeseries
    ]


def series_from_dicts(items: Iterable[dict[str, Any]]) -> list[TimeSeries]:
    """Build time series from plain dictionaries.

    Each item has ``labels`` (a mapping or a list of ``[name, value]`` pairs)
    and ``samples`` (a list of ``[timestamp_ms, value]`` pairs or
    ``{"timestamp": ..., "value": ...}`` mappings).

    Raises:
        ValueError: If an item is missing fields or has malformed points
    """
    series = []
    for idx, item in enumerate(items):
        try:
            raw_labels = item["labels"]
            raw_samples = item.get("samples", [])
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Time series {idx} is malformed: {e}") from e

        if isinstance(raw_labels, dict):
            labels = tuple((str(k), str(v)) for k, v in raw_labels.items())
        else:
            labels = tuple((str(k), str(v)) for k, v in raw_labels)

        samples = []
        for sample_idx, raw in enumerate(raw_samples):
            try:
                if isinstance(raw, dict):
                    samples.append(Sample(int(raw["timestamp"]), float(raw["value"])))
                else:
                    timestamp, value = raw
                    samples.append(Sample(int(timestamp), float(value)))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(
                    f"Time series {idx}, sample {sample_idx} is malformed: {e}"
                ) from e

        series.append(TimeSeries(labels=labels, samples=tuple(samples)))

    return series
