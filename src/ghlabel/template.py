"""Label template loading.

A template is a YAML list of mappings, each with a `name` and a `color`:

    - name: bug
      color: fc2929
    - name: duplicate
      color: cccccc

Entries are decoded strictly; anything malformed raises `TemplateError`
before any remote call is made. Keys other than `name` and `color` are
ignored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator

from ghlabel.labels import Label, duplicate_names

logger = logging.getLogger(__name__)

_COLOR_RE = re.compile(r"^[0-9a-fA-F]{6}$")


class TemplateError(Exception):
    """The label template could not be read or is malformed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class LabelRecord(BaseModel):
    """One template entry, as written by the user."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: StrictStr
    color: StrictStr

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        # GitHub trims label names on write.
        name = value.strip()
        if not name:
            raise ValueError("name must not be empty")
        return name

    @field_validator("color")
    @classmethod
    def _color_is_hex(cls, value: str) -> str:
        if value.startswith("#"):
            raise ValueError("color must not start with '#'")
        if not _COLOR_RE.match(value):
            raise ValueError("color must be 6 hex digits, e.g. 'fc2929'")
        return value

    def to_label(self) -> Label:
        return Label(name=self.name, color=self.color)


def _describe_validation_error(e: ValidationError, raw: Any) -> str:
    problems: list[str] = []
    for err in e.errors():
        field = ".".join(str(part) for part in err["loc"]) or "entry"
        msg = err["msg"]
        if err["type"] == "missing":
            msg = "is required"
        elif (
            err["type"] == "string_type"
            and field == "color"
            and isinstance(raw, dict)
            and isinstance(raw.get("color"), int)
        ):
            msg = "must be a string; quote all-digit colors, e.g. '000000'"
        problems.append(f"`{field}` {msg}")
    return "; ".join(problems)


def parse_template(text: str, *, path: Path | None = None) -> list[Label]:
    """Decode template text into labels, in file order."""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateError(f"Failed to parse YAML data: {e}", path=path) from e

    if data is None:
        raise TemplateError("Expected the template to have some data", path=path)
    if not isinstance(data, list):
        raise TemplateError("Expected the template to be a single list of labels", path=path)

    labels: list[Label] = []
    for index, raw in enumerate(data, start=1):
        if not isinstance(raw, dict):
            raise TemplateError(
                f"Invalid label #{index}: each label must be a mapping with the keys "
                "`name` and `color`",
                path=path,
            )
        try:
            record = LabelRecord.model_validate(raw)
        except ValidationError as e:
            raise TemplateError(
                f"Invalid label #{index}: {_describe_validation_error(e, raw)}", path=path
            ) from e
        labels.append(record.to_label())

    duplicates = duplicate_names(labels)
    if duplicates:
        logger.warning(
            "Template defines labels more than once; the last definition wins",
            extra={"labels": duplicates, "path": str(path) if path else None},
        )
    return labels


def load_template(path: Path) -> list[Label]:
    """Read and decode a label template file.

    Raises:
        TemplateError: If the file is missing, unreadable or malformed.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"Failed to read {path}: {e}", path=path) from e

    labels = parse_template(text, path=path)
    logger.debug("Template loaded", extra={"path": str(path), "count": len(labels)})
    return labels
