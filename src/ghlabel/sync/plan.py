"""Action plan data model.

A plan is built once by the reconciliation engine and consumed once by the
executor. It is immutable: actions are frozen and held in a tuple.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from ghlabel.labels import Label

DRY_RUN_PREFIX = "[DRY RUN] "


class ActionKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Action:
    """A single label mutation.

    For CREATE and UPDATE the label is the desired label (carrying the new
    color). For DELETE it is the remote label being removed.
    """

    kind: ActionKind
    label: Label

    @property
    def name(self) -> str:
        return self.label.name

    def describe(self, *, dry_run: bool = False) -> str:
        """Render a one-line, human-readable description of the action."""

        if self.kind is ActionKind.DELETE:
            text = f"DELETE {self.label.name}"
        else:
            text = f"{self.kind.name} {self.label.describe()}"
        return f"{DRY_RUN_PREFIX}{text}" if dry_run else text


@dataclass(frozen=True, slots=True)
class ActionPlan:
    actions: tuple[Action, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def __bool__(self) -> bool:
        return bool(self.actions)

    def of_kind(self, kind: ActionKind) -> tuple[Action, ...]:
        return tuple(a for a in self.actions if a.kind is kind)

    def counts(self) -> dict[str, int]:
        return {kind.value: len(self.of_kind(kind)) for kind in ActionKind}

    def render(self, *, dry_run: bool = False) -> list[str]:
        return [action.describe(dry_run=dry_run) for action in self.actions]
