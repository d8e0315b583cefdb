"""Reconciliation engine.

Computes the plan that converges a repository's labels onto a template:

- desired labels missing remotely are created (unless creation is suppressed)
- labels present on both sides with a different color are updated; color
  correction is neither a creation nor a deletion, so it is never suppressed
- remote labels missing from the template are deleted (unless deletion is
  suppressed)

Actions are ordered creates, updates, deletes, each sorted by label name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ghlabel.labels import Label, build_label_set
from ghlabel.sync.plan import Action, ActionKind, ActionPlan

logger = logging.getLogger(__name__)


def compute_plan(
    desired: Iterable[Label],
    actual: Iterable[Label],
    *,
    allow_create: bool = True,
    allow_delete: bool = True,
) -> ActionPlan:
    desired_set = build_label_set(desired)
    actual_set = build_label_set(actual)

    creates: list[Action] = []
    updates: list[Action] = []
    deletes: list[Action] = []

    for name in sorted(desired_set):
        wanted = desired_set[name]
        current = actual_set.get(name)
        if current is None:
            if allow_create:
                creates.append(Action(ActionKind.CREATE, wanted))
        elif not wanted.same_color(current):
            updates.append(Action(ActionKind.UPDATE, wanted))

    if allow_delete:
        for name in sorted(actual_set.keys() - desired_set.keys()):
            deletes.append(Action(ActionKind.DELETE, actual_set[name]))

    plan = ActionPlan(tuple(creates + updates + deletes))
    logger.debug(
        "Computed label plan",
        extra={
            "desired": len(desired_set),
            "actual": len(actual_set),
            "allow_create": allow_create,
            "allow_delete": allow_delete,
            **plan.counts(),
        },
    )
    return plan
