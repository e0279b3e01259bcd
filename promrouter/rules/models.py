"""Routing rules and rule sets."""

from typing import Iterable, Optional

from promrouter.logging_config import get_logger
from promrouter.rules.rewriter import LabelRewriter
from promrouter.rules.selectors import MetricNameSelector

logger = get_logger(__name__)


class Rule:
    """Selection, label rewrite and routing policy for a class of metrics.

    A rule is selected when any of its selectors matches the metric name.
    Rewriters are keyed by their trigger label name; when several rewriters
    share a trigger name the last one registered wins.
    """

    def __init__(
        self,
        topic: str,
        token: str,
        selectors: Iterable[MetricNameSelector],
        label_rewriters: Iterable[LabelRewriter] = (),
        org: int = 0,
        delete_labels: Iterable[str] = (),
    ):
        """Initialize rule.

        Args:
            topic: Destination topic for matched samples
            token: Credential token placed in the envelope source
            selectors: Metric name selectors, OR-ed
            label_rewriters: Rewriters applied to matched samples' labels
            org: Organization id, 0 means use the rule set default
            delete_labels: Label names removed after rewriting
        """
        self.topic = topic
        self.token = token
        self.org = org
        self.selectors = tuple(selectors)
        self.delete_labels = frozenset(delete_labels)

        self.rewriters: dict[str, LabelRewriter] = {}
        for rewriter in label_rewriters:
            if rewriter.name in self.rewriters:
                logger.warning(
                    "duplicate_label_rewriter",
                    topic=topic,
                    label=rewriter.name,
                    replaced=repr(self.rewriters[rewriter.name]),
                )
            self.rewriters[rewriter.name] = rewriter

    def selected(self, name: str) -> bool:
        """Check whether any selector matches the metric name."""
        return any(selector.match(name) for selector in self.selectors)

    def rewrite_labels(self, labels: dict[str, str]) -> dict[str, str]:
        """Apply rewriters and the delete set to a label mapping in place.

        Each rewriter sees the label values as they were before rewriting.

        Args:
            labels: Mutable label mapping of one sample

        Returns:
            dict: The same mapping, rewritten
        """
        original = dict(labels)

        for key, rewriter in self.rewriters.items():
            if key not in original:
                continue
            new_labels = rewriter.gen_new_labels(key, original[key])
            if new_labels and rewriter.overwrite:
                labels.pop(key, None)
            labels.update(new_labels)

        if not self.delete_labels:
            return labels

        for key in self.delete_labels:
            labels.pop(key, None)

        return labels

    def __repr__(self) -> str:
        return (
            f"Rule(topic={self.topic}, org={self.org}, selectors={list(self.selectors)}, "
            f"rewriters={list(self.rewriters)})"
        )


class RuleSet:
    """Ordered rules with first-match selection and a default organization."""

    def __init__(self, rules: Iterable[Rule], default_org: int):
        self.rules = tuple(rules)
        self.default_org = default_org

    def select(self, name: str) -> Optional[Rule]:
        """Return the first rule whose selectors match, or None."""
        for rule in self.rules:
            if rule.selected(name):
                return rule
        return None

    def resolve_org(self, rule: Rule) -> int:
        """Return the rule's org, falling back to the default org."""
        return rule.org if rule.org != 0 else self.default_org

    def __len__(self) -> int:
        return len(self.rules)
