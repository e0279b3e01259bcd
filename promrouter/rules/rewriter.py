"""Regex-capture driven label rewriting."""

import re
from typing import Iterable

from promrouter.exceptions import ConfigValidationError
from promrouter.rules.fields import FieldPattern


class LabelRewriter:
    """Derive new labels from one trigger label.

    The trigger label's value is searched with ``regex``; on a match every
    output ``FieldPattern`` is resolved against the capture groups.

    Example:
        rewriter = LabelRewriter(
            name="node",
            regex=r"(?P<ip>.*?):(?P<port>.*)",
            labels=[FieldPattern("ip", "$1"), FieldPattern("port", "$port")],
        )
        rewriter.gen_new_labels("node", "10.10.89.61:8080")
        # {"ip": "10.10.89.61", "port": "8080"}
    """

    __slots__ = ("name", "pattern", "overwrite", "labels", "_regex")

    def __init__(
        self,
        name: str,
        regex: str,
        labels: Iterable[FieldPattern],
        overwrite: bool = False,
    ):
        """Initialize rewriter.

        Args:
            name: Trigger label name
            regex: Regular expression applied to the trigger label's value
            labels: Output label patterns, resolved in order
            overwrite: Drop the trigger label when new labels are produced

        Raises:
            ConfigValidationError: If the regex does not compile
        """
        self.name = name
        self.pattern = regex
        self.overwrite = overwrite
        self.labels = tuple(labels)

        try:
            self._regex = re.compile(regex)
        except re.error as e:
            raise ConfigValidationError(
                f"Invalid rewriter regex {regex!r} for label {name!r}: {e}",
                label=name,
                regex=regex,
            ) from e

    def gen_new_labels(self, key: str, value: str) -> dict[str, str]:
        """Generate new labels from a trigger label.

        Args:
            key: Label name
            value: Label value

        Returns:
            dict: New label names to values; empty when the key is not this
            rewriter's trigger, no output labels are configured, or the regex
            does not match
        """
        if key != self.name or not self.labels:
            return {}

        match = self._regex.search(value)
        if match is None:
            return {}

        new_labels: dict[str, str] = {}
        for label in self.labels:
            if not label.name:
                continue
            new_name, new_value = label.resolve(match, key, value)
            new_labels[new_name] = new_value

        return new_labels

    def __repr__(self) -> str:
        return (
            f"LabelRewriter(name={self.name}, regex={self.pattern}, "
            f"overwrite={self.overwrite}, labels={len(self.labels)})"
        )
