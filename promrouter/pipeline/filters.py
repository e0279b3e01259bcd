"""Static series filter for the template-routed pipeline.

Filters are written as Prometheus series selectors with equality matchers,
for example ``node_cpu_seconds_total{mode="idle", cpu="0"}``. Selectors for
the same metric name are OR-ed; every matcher of one selector must hold.
"""

import re
from typing import Iterable

from promrouter.exceptions import ConfigValidationError

_SELECTOR = re.compile(
    r"^\s*(?P<name>[a-zA-Z_:][a-zA-Z0-9_:]*)?\s*(?:\{(?P<body>.*)\})?\s*$",
    re.DOTALL,
)
_MATCHER = re.compile(
    r"\s*(?P<label>[a-zA-Z_][a-zA-Z0-9_]*)\s*(?P<op>=~|!~|!=|=)\s*"
    r"(?P<value>\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*')\s*(?:,|\Z)",
    re.DOTALL,
)
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _unquote(quoted: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), quoted[1:-1])


def parse_series_selector(selector: str) -> tuple[str, dict[str, str]]:
    """Parse a series selector into a metric name and label equalities.

    Args:
        selector: Selector such as ``up{job="node"}`` or ``{__name__="up"}``

    Returns:
        tuple: (metric_name, labels)

    Raises:
        ConfigValidationError: If the selector is malformed, uses a non
            equality matcher, or names no metric
    """
    parsed = _SELECTOR.match(selector)
    if parsed is None:
        raise ConfigValidationError(f"Invalid series selector: {selector!r}", selector=selector)

    name = parsed.group("name") or ""
    body = (parsed.group("body") or "").strip()
    labels: dict[str, str] = {}

    pos = 0
    while pos < len(body):
        matcher = _MATCHER.match(body, pos)
        if matcher is None:
            raise ConfigValidationError(
                f"Invalid label matcher in series selector: {selector!r}", selector=selector
            )
        if matcher.group("op") != "=":
            raise ConfigValidationError(
                f"Only equality matchers are supported, got {matcher.group('op')!r} "
                f"in {selector!r}",
                selector=selector,
            )
        labels[matcher.group("label")] = _unquote(matcher.group("value"))
        pos = matcher.end()

    if "__name__" in labels:
        label_name = labels.pop("__name__")
        if name and name != label_name:
            raise ConfigValidationError(
                f"Conflicting metric names in series selector: {selector!r}",
                selector=selector,
            )
        name = label_name

    if not name:
        raise ConfigValidationError(
            f"Series selector must name a metric: {selector!r}", selector=selector
        )

    return name, labels


class MatchFilter:
    """Name and label filter; an empty filter passes everything."""

    def __init__(self, selectors: Iterable[str] = ()):
        self.selectors = tuple(selectors)
        self._by_name: dict[str, list[dict[str, str]]] = {}
        for selector in self.selectors:
            name, labels = parse_series_selector(selector)
            self._by_name.setdefault(name, []).append(labels)

    def matches(self, name: str, labels: dict[str, str]) -> bool:
        """Check whether a sample passes the filter."""
        if not self._by_name:
            return True

        candidates = self._by_name.get(name)
        if candidates is None:
            return False

        for required in candidates:
            if all(labels.get(key) == value for key, value in required.items()):
                return True
        return False

    def __len__(self) -> int:
        return len(self.selectors)
