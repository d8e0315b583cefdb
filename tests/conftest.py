"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ghlabel.github.client import RemoteError
from ghlabel.labels import Label


class InMemoryLabelSource:
    """A remote label source backed by a dict, with optional injected failures."""

    def __init__(self, labels: list[Label] | None = None, *, fail_on: set[str] | None = None):
        self.labels: dict[str, Label] = {label.name: label for label in labels or []}
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, str]] = []

    @property
    def repository(self) -> str:
        return "octo-org/octo-repo"

    def _check(self, op: str, name: str) -> None:
        self.calls.append((op, name))
        if name in self.fail_on:
            raise RemoteError(f"{op} {name} rejected", status=422)

    def list_labels(self) -> list[Label]:
        return list(self.labels.values())

    def create_label(self, label: Label) -> None:
        self._check("create", label.name)
        self.labels[label.name] = label

    def update_label(self, name: str, color: str) -> None:
        self._check("update", name)
        self.labels[name] = Label(name=name, color=color)

    def delete_label(self, name: str) -> None:
        self._check("delete", name)
        del self.labels[name]


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo `configure_logging` so handlers bound to captured streams do not leak."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def desired_labels() -> list[Label]:
    """The desired labels of the worked bug/duplicate/wontfix example."""
    return [Label("bug", "fc2929"), Label("duplicate", "cccccc")]


@pytest.fixture
def actual_labels() -> list[Label]:
    """The remote labels of the worked bug/duplicate/wontfix example."""
    return [Label("bug", "ffffff"), Label("wontfix", "ffffff")]


@pytest.fixture
def remote(actual_labels: list[Label]) -> InMemoryLabelSource:
    return InMemoryLabelSource(actual_labels)


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    """Provide a valid label template on disk."""
    path = tmp_path / "labels.yml"
    path.write_text(
        "- name: bug\n  color: fc2929\n- name: duplicate\n  color: cccccc\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_remote() -> type[InMemoryLabelSource]:
    """Provide the in-memory remote class for tests that build their own."""
    return InMemoryLabelSource
