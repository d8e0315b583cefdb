"""Plan execution.

Applies an `ActionPlan` against a remote label source, or only reports it in
dry-run mode. Each applied action is written to the output stream as one
line; an empty plan writes nothing.

Failure policy is continue-on-error: a failing create/update/delete is
recorded as an `ActionError`, reported as a `FAILURE` line, and the remaining
actions still run. This holds for any exception raised by the remote, not
only `RemoteError`, and does not depend on `max_workers`. The returned
summary tells "no changes", "applied", "partially applied" and "nothing
applied" apart.
"""

from __future__ import annotations

import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

from ghlabel.github.client import RemoteError, RemoteLabelSource
from ghlabel.sync.plan import Action, ActionKind, ActionPlan

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """A single create/update/delete call failed."""

    def __init__(self, action: Action, cause: Exception) -> None:
        super().__init__(f"{action.kind.name} {action.name}: {cause}")
        self.action = action
        self.cause = cause

    def describe(self) -> str:
        return f"FAILURE {self}"


class PlanExecutionError(Exception):
    """One or more actions of a plan failed."""

    def __init__(self, failures: list[ActionError], *, applied: int) -> None:
        noun = "action" if len(failures) == 1 else "actions"
        super().__init__(
            f"{len(failures)} {noun} failed ({applied} applied): "
            + "; ".join(str(f) for f in failures)
        )
        self.failures = failures
        self.applied = applied


class ExecutionStatus(str, Enum):
    NO_CHANGES = "no_changes"
    PREVIEWED = "previewed"
    APPLIED = "applied"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(slots=True)
class ExecutionSummary:
    status: ExecutionStatus
    dry_run: bool
    applied: list[Action] = field(default_factory=list)
    failures: list[ActionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise PlanExecutionError(self.failures, applied=len(self.applied))


def _apply(action: Action, remote: RemoteLabelSource) -> None:
    label = action.label
    if action.kind is ActionKind.CREATE:
        remote.create_label(label)
    elif action.kind is ActionKind.UPDATE:
        remote.update_label(label.name, label.color)
    else:
        remote.delete_label(label.name)


def _status(plan: ActionPlan, failures: list[ActionError]) -> ExecutionStatus:
    if not plan:
        return ExecutionStatus.NO_CHANGES
    if not failures:
        return ExecutionStatus.APPLIED
    if len(failures) < len(plan):
        return ExecutionStatus.PARTIAL
    return ExecutionStatus.FAILED


def execute(
    plan: ActionPlan,
    *,
    dry_run: bool,
    remote: RemoteLabelSource,
    out: TextIO | None = None,
    max_workers: int = 1,
) -> ExecutionSummary:
    """Apply (or, with `dry_run`, only print) every action in `plan`.

    Args:
        plan: Actions to run, in order.
        dry_run: Print what would happen without calling the remote.
        remote: Label source the mutations are sent to.
        out: Stream action lines are written to (defaults to stdout).
        max_workers: Run live actions on this many threads. With more than
            one worker, lines are written in completion order.

    Returns:
        A summary of applied actions and per-action failures.
    """
    stream = out if out is not None else sys.stdout
    lock = threading.Lock()
    applied: list[Action] = []
    failures: list[ActionError] = []

    def write(line: str) -> None:
        with lock:
            stream.write(line + "\n")
            stream.flush()

    if dry_run:
        for line in plan.render(dry_run=True):
            write(line)
        return ExecutionSummary(
            status=ExecutionStatus.PREVIEWED if plan else ExecutionStatus.NO_CHANGES,
            dry_run=True,
        )

    def run(action: Action) -> None:
        try:
            _apply(action, remote)
        except Exception as e:
            error = ActionError(action, e)
            details = {
                "repo": remote.repository,
                "action": action.kind.value,
                "label": action.name,
            }
            if isinstance(e, RemoteError):
                logger.error("Label action failed", extra={**details, "status": e.status})
            else:
                logger.exception("Label action failed unexpectedly", extra=details)
            with lock:
                failures.append(error)
            write(error.describe())
            return
        with lock:
            applied.append(action)
        write(action.describe())

    if max_workers > 1 and len(plan) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            list(pool.map(run, plan))
    else:
        for action in plan:
            run(action)

    status = _status(plan, failures)
    if plan:
        logger.info(
            "Label plan executed",
            extra={
                "repo": remote.repository,
                "status": status.value,
                "applied": len(applied),
                "failed": len(failures),
            },
        )
    return ExecutionSummary(status=status, dry_run=False, applied=applied, failures=failures)
