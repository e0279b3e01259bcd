"""Label/value pattern classification for label rewriting.

A pattern string in a rewriter's output labels is bound to one of four sources:

- ``IdentityMarker``: the sentinel ``__name__`` (name side) or ``__value__``
  (value side), bound to the trigger label's own name or value.
- ``IndexedGroup``: ``$<digits>``, bound to a numbered capture group. ``$0`` is
  the whole match.
- ``NamedGroup``: ``$<non-digit><word chars>``, bound to a named capture group.
- ``LiteralText``: anything else, used verbatim.

Classification is computed once when a ``FieldPattern`` is built.
"""

import re
from dataclasses import dataclass, field
from typing import Union

NAME_SENTINEL = "__name__"
VALUE_SENTINEL = "__value__"

# Group indexes are bounded like a signed 64-bit parse; larger values stay literal.
MAX_GROUP_INDEX = 2**63 - 1

_INDEXED_GROUP = re.compile(r"^\$(\d+)\Z", re.ASCII)
_NAMED_GROUP = re.compile(r"^\$([^0-9]\w+)", re.ASCII)


@dataclass(frozen=True)
class IdentityMarker:
    """Binds to the trigger label's name or value."""

    def resolve(self, match: re.Match[str], identity: str) -> str:
        return identity


@dataclass(frozen=True)
class IndexedGroup:
    """Binds to a numbered capture group."""

    index: int

    def resolve(self, match: re.Match[str], identity: str) -> str:
        if 0 <= self.index <= match.re.groups:
            return match.group(self.index) or ""
        return ""


@dataclass(frozen=True)
class NamedGroup:
    """Binds to a named capture group."""

    name: str

    def resolve(self, match: re.Match[str], identity: str) -> str:
        if self.name not in match.re.groupindex:
            return ""
        return match.group(self.name) or ""


@dataclass(frozen=True)
class LiteralText:
    """Binds to the pattern text itself."""

    text: str

    def resolve(self, match: re.Match[str], identity: str) -> str:
        return self.text


Classification = Union[IdentityMarker, IndexedGroup, NamedGroup, LiteralText]


def _classify(pattern: str, sentinel: str) -> Classification:
    if pattern == sentinel:
        return IdentityMarker()

    if pattern.startswith("$"):
        indexed = _INDEXED_GROUP.match(pattern)
        if indexed:
            index = int(indexed.group(1))
            if index > MAX_GROUP_INDEX:
                return LiteralText(pattern)
            return IndexedGroup(index)

        named = _NAMED_GROUP.match(pattern)
        if named:
            return NamedGroup(named.group(1))

    return LiteralText(pattern)


def classify_name(pattern: str) -> Classification:
    """Classify the name side of a field pattern."""
    return _classify(pattern, NAME_SENTINEL)


def classify_value(pattern: str) -> Classification:
    """Classify the value side of a field pattern."""
    return _classify(pattern, VALUE_SENTINEL)


@dataclass(frozen=True)
class FieldPattern:
    """Output label template of a rewriter: a (name, value) pattern pair."""

    name: str
    value: str
    name_kind: Classification = field(init=False, repr=False, compare=False)
    value_kind: Classification = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_kind", classify_name(self.name))
        object.__setattr__(self, "value_kind", classify_value(self.value))

    def resolve(self, match: re.Match[str], key: str, value: str) -> tuple[str, str]:
        """Resolve the output label (name, value) against a regex match."""
        return (
            self.name_kind.resolve(match, key),
            self.value_kind.resolve(match, value),
        )
