"""Label value type and name-keyed label sets.

A label is identified by its name alone (case-sensitive). Two labels with the
same name "differ" when their colors differ; colors compare case-insensitively
since GitHub accepts either case but always reports lowercase.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass


def normalize_color(color: str) -> str:
    return color.strip().lower()


@dataclass(frozen=True, slots=True)
class Label:
    name: str
    color: str

    def same_color(self, other: Label) -> bool:
        return normalize_color(self.color) == normalize_color(other.color)

    def describe(self) -> str:
        return f"{self.name}: {self.color}"


LabelSet = dict[str, Label]


def build_label_set(labels: Iterable[Label]) -> LabelSet:
    """Fold an ordered sequence of labels into a name -> label mapping.

    Duplicate names are a template-authoring error; the last occurrence wins.
    """

    label_set: LabelSet = {}
    for label in labels:
        label_set[label.name] = label
    return label_set


def duplicate_names(labels: Iterable[Label]) -> list[str]:
    counts = Counter(label.name for label in labels)
    return sorted(name for name, count in counts.items() if count > 1)
