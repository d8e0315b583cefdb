"""Unit tests for the reconciliation engine."""

from __future__ import annotations

import itertools

import pytest

from ghlabel.labels import Label, build_label_set, normalize_color
from ghlabel.sync.engine import compute_plan
from ghlabel.sync.plan import Action, ActionKind, ActionPlan

FLAG_COMBINATIONS = list(itertools.product([True, False], repeat=2))

SCENARIOS: list[tuple[list[Label], list[Label]]] = [
    ([], []),
    ([Label("bug", "fc2929")], []),
    ([], [Label("bug", "fc2929")]),
    (
        [Label("bug", "fc2929"), Label("duplicate", "cccccc"), Label("enhancement", "84b6eb")],
        [Label("bug", "ffffff"), Label("wontfix", "ffffff"), Label("enhancement", "84B6EB")],
    ),
    (
        [Label("a", "000000"), Label("b", "111111"), Label("a", "222222")],
        [Label("a", "000000"), Label("c", "333333")],
    ),
]


def _apply(plan: ActionPlan, actual: list[Label]) -> dict[str, str]:
    state = {label.name: normalize_color(label.color) for label in actual}
    for action in plan:
        if action.kind is ActionKind.DELETE:
            del state[action.name]
        else:
            state[action.name] = normalize_color(action.label.color)
    return state


def test_worked_example_with_both_flags(
    desired_labels: list[Label], actual_labels: list[Label]
) -> None:
    plan = compute_plan(desired_labels, actual_labels)

    assert list(plan) == [
        Action(ActionKind.CREATE, Label("duplicate", "cccccc")),
        Action(ActionKind.UPDATE, Label("bug", "fc2929")),
        Action(ActionKind.DELETE, Label("wontfix", "ffffff")),
    ]


def test_worked_example_without_delete(
    desired_labels: list[Label], actual_labels: list[Label]
) -> None:
    plan = compute_plan(desired_labels, actual_labels, allow_delete=False)

    assert list(plan) == [
        Action(ActionKind.CREATE, Label("duplicate", "cccccc")),
        Action(ActionKind.UPDATE, Label("bug", "fc2929")),
    ]


def test_worked_example_without_create_or_delete(
    desired_labels: list[Label], actual_labels: list[Label]
) -> None:
    plan = compute_plan(desired_labels, actual_labels, allow_create=False, allow_delete=False)

    assert list(plan) == [Action(ActionKind.UPDATE, Label("bug", "fc2929"))]


def test_actions_are_grouped_by_kind_and_sorted_by_name() -> None:
    desired = [Label("zeta", "000000"), Label("alpha", "000000"), Label("mid", "111111")]
    actual = [Label("mid", "222222"), Label("omega", "0"), Label("beta", "0")]

    plan = compute_plan(desired, actual)

    assert [(a.kind, a.name) for a in plan] == [
        (ActionKind.CREATE, "alpha"),
        (ActionKind.CREATE, "zeta"),
        (ActionKind.UPDATE, "mid"),
        (ActionKind.DELETE, "beta"),
        (ActionKind.DELETE, "omega"),
    ]


def test_update_carries_desired_color_and_delete_carries_remote_label() -> None:
    plan = compute_plan([Label("bug", "fc2929")], [Label("bug", "ffffff"), Label("old", "abcdef")])

    assert plan.of_kind(ActionKind.UPDATE)[0].label == Label("bug", "fc2929")
    assert plan.of_kind(ActionKind.DELETE)[0].label == Label("old", "abcdef")


def test_color_comparison_is_case_insensitive() -> None:
    plan = compute_plan([Label("bug", "FC2929")], [Label("bug", "fc2929")])

    assert not plan


def test_label_names_are_case_sensitive() -> None:
    plan = compute_plan([Label("Bug", "fc2929")], [Label("bug", "fc2929")])

    assert [(a.kind, a.name) for a in plan] == [
        (ActionKind.CREATE, "Bug"),
        (ActionKind.DELETE, "bug"),
    ]


def test_duplicate_desired_names_use_last_definition() -> None:
    plan = compute_plan(
        [Label("bug", "ffffff"), Label("bug", "fc2929")], [Label("bug", "ffffff")]
    )

    assert list(plan) == [Action(ActionKind.UPDATE, Label("bug", "fc2929"))]


def test_empty_desired_deletes_everything_only_when_allowed() -> None:
    actual = [Label("bug", "fc2929"), Label("docs", "0075ca")]

    assert len(compute_plan([], actual).of_kind(ActionKind.DELETE)) == 2
    assert not compute_plan([], actual, allow_delete=False)


@pytest.mark.parametrize(("desired", "actual"), SCENARIOS)
def test_plan_converges_remote_to_template(desired: list[Label], actual: list[Label]) -> None:
    plan = compute_plan(desired, actual)

    expected = {
        name: normalize_color(label.color) for name, label in build_label_set(desired).items()
    }
    assert _apply(plan, actual) == expected


@pytest.mark.parametrize(("desired", "actual"), SCENARIOS)
def test_second_run_after_apply_is_empty(desired: list[Label], actual: list[Label]) -> None:
    plan = compute_plan(desired, actual)
    converged = [Label(name, color) for name, color in _apply(plan, actual).items()]

    assert not compute_plan(desired, converged)


@pytest.mark.parametrize(("desired", "actual"), SCENARIOS)
@pytest.mark.parametrize(("allow_create", "allow_delete"), FLAG_COMBINATIONS)
def test_suppressed_kinds_never_appear(
    desired: list[Label], actual: list[Label], allow_create: bool, allow_delete: bool
) -> None:
    plan = compute_plan(desired, actual, allow_create=allow_create, allow_delete=allow_delete)

    if not allow_create:
        assert not plan.of_kind(ActionKind.CREATE)
    if not allow_delete:
        assert not plan.of_kind(ActionKind.DELETE)


@pytest.mark.parametrize(("allow_create", "allow_delete"), FLAG_COMBINATIONS)
def test_color_drift_is_always_exactly_one_update(allow_create: bool, allow_delete: bool) -> None:
    plan = compute_plan(
        [Label("bug", "fc2929")],
        [Label("bug", "ffffff")],
        allow_create=allow_create,
        allow_delete=allow_delete,
    )

    assert list(plan) == [Action(ActionKind.UPDATE, Label("bug", "fc2929"))]


@pytest.mark.parametrize(("allow_create", "allow_delete"), FLAG_COMBINATIONS)
def test_identical_sets_yield_empty_plan(allow_create: bool, allow_delete: bool) -> None:
    labels = [Label("bug", "fc2929"), Label("duplicate", "cccccc")]

    plan = compute_plan(
        labels, list(reversed(labels)), allow_create=allow_create, allow_delete=allow_delete
    )

    assert not plan
    assert len(plan) == 0


def test_compute_plan_does_not_mutate_inputs(
    desired_labels: list[Label], actual_labels: list[Label]
) -> None:
    desired_before = list(desired_labels)
    actual_before = list(actual_labels)

    compute_plan(desired_labels, actual_labels)

    assert desired_labels == desired_before
    assert actual_labels == actual_before
