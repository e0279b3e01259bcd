"""Metric name selectors."""

import re

from promrouter.exceptions import ConfigValidationError

SELECT_EQ = "eq"
SELECT_START_WITH = "start_with"
SELECT_REGEX = "regex"

SELECT_METHODS = (SELECT_EQ, SELECT_START_WITH, SELECT_REGEX)


class MetricNameSelector:
    """Predicate over a metric name.

    Methods:
    - ``eq``: exact string comparison
    - ``start_with``: prefix comparison
    - ``regex``: unanchored search, compiled once at construction

    Example:
        selector = MetricNameSelector("start_with", "kafka_")
        selector.match("kafka_brokers_number")  # True
    """

    __slots__ = ("method", "value", "_regex")

    def __init__(self, method: str, value: str):
        """Initialize selector.

        Args:
            method: One of ``eq``, ``start_with``, ``regex``
            value: Comparison value or regular expression

        Raises:
            ConfigValidationError: If the method is unknown or the regex is invalid
        """
        if method not in SELECT_METHODS:
            raise ConfigValidationError(
                f"Unknown selector method: {method!r}. Supported: {list(SELECT_METHODS)}",
                method=method,
                value=value,
            )

        self.method = method
        self.value = value
        self._regex: re.Pattern[str] | None = None

        if method == SELECT_REGEX:
            try:
                self._regex = re.compile(value)
            except re.error as e:
                raise ConfigValidationError(
                    f"Invalid selector regex {value!r}: {e}",
                    method=method,
                    value=value,
                ) from e

    def match(self, name: str) -> bool:
        """Check whether a metric name satisfies this selector."""
        if self.method == SELECT_EQ:
            return name == self.value
        if self.method == SELECT_START_WITH:
            return name.startswith(self.value)
        return self._regex.search(name) is not None

    def __repr__(self) -> str:
        return f"MetricNameSelector(method={self.method}, value={self.value})"
