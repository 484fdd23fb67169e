"""In-memory text edits applied in order to file content.

Changes are applied strictly in list order, each one operating on the result
of the previous change. Application is lenient: a malformed change or an
out-of-range line insert is skipped rather than failing the whole edit, and
every skip is reported in the returned :class:`EditResult`.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

CHANGE_TYPES = ("replace", "append", "prepend", "insert_at_line")


class ReplaceChange(BaseModel):
    """Replace the first occurrence of ``old`` with ``new``."""

    type: Literal["replace"] = "replace"
    old: str | None = None
    new: str | None = None


class AppendChange(BaseModel):
    """Add ``content`` at the end."""

    type: Literal["append"] = "append"
    content: str | None = None


class PrependChange(BaseModel):
    """Add ``content`` at the start."""

    type: Literal["prepend"] = "prepend"
    content: str | None = None


class InsertAtLineChange(BaseModel):
    """Insert ``content`` as a new line at 0-based index ``line``."""

    type: Literal["insert_at_line"] = "insert_at_line"
    line: int | None = None
    content: str | None = None


Change = Annotated[
    Union[ReplaceChange, AppendChange, PrependChange, InsertAtLineChange],
    Field(discriminator="type"),
]

_change_adapter: TypeAdapter = TypeAdapter(Change)


@dataclass
class MalformedChange:
    """A change entry that could not be parsed; always skipped."""

    raw: Any
    reason: str
    type: str = "unknown"


@dataclass
class ChangeOutcome:
    """What happened to one change."""

    index: int
    type: str
    applied: bool
    reason: str | None = None


@dataclass
class EditResult:
    """New content plus a per-change outcome list."""

    content: str
    outcomes: list[ChangeOutcome] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.applied)

    @property
    def skipped(self) -> list[ChangeOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.applied]


def parse_change(raw: Any) -> "Change | MalformedChange":
    """Parse one change entry without raising.

    Already-typed changes are returned unchanged. Dicts are validated against
    the change union; anything that fails becomes a :class:`MalformedChange`.
    """
    if isinstance(raw, (ReplaceChange, AppendChange, PrependChange, InsertAtLineChange)):
        return raw
    if not isinstance(raw, dict):
        return MalformedChange(raw=raw, reason="not_an_object")

    change_type = raw.get("type")
    if change_type not in CHANGE_TYPES:
        return MalformedChange(raw=raw, reason="unknown_type", type=str(change_type))

    try:
        return _change_adapter.validate_python(raw)
    except ValidationError:
        return MalformedChange(raw=raw, reason="invalid_field", type=change_type)


def _apply_one(content: str, change: "Change") -> tuple[str, str | None]:
    """Apply a single typed change. Returns (content, skip_reason)."""
    if isinstance(change, ReplaceChange):
        if not change.old or change.new is None:
            return content, "missing_field"
        if change.old not in content:
            return content, "not_found"
        return content.replace(change.old, change.new, 1), None

    if isinstance(change, AppendChange):
        if not change.content:
            return content, "missing_field"
        return content + change.content, None

    if isinstance(change, PrependChange):
        if not change.content:
            return content, "missing_field"
        return change.content + content, None

    if isinstance(change, InsertAtLineChange):
        if change.line is None or not change.content:
            return content, "missing_field"
        lines = content.split("\n")
        if not 0 <= change.line <= len(lines):
            return content, "line_out_of_range"
        lines.insert(change.line, change.content)
        return "\n".join(lines), None

    return content, "unknown_type"


def apply_changes(content: str, changes: Iterable[Any]) -> EditResult:
    """Apply ``changes`` to ``content`` in order.

    Args:
        content: Original text
        changes: Typed changes or raw dicts (``{"type": "replace", "old": ..., "new": ...}``)

    Returns:
        EditResult with the final content and one ChangeOutcome per change

    Example:
        >>> apply_changes("aa", [{"type": "replace", "old": "a", "new": "b"}]).content
        'ba'
    """
    outcomes: list[ChangeOutcome] = []

    for index, raw in enumerate(changes):
        change = parse_change(raw)
        if isinstance(change, MalformedChange):
            reason = change.reason
            outcomes.append(ChangeOutcome(index=index, type=change.type, applied=False, reason=reason))
            logger.debug(f"Skipped change {index}: {reason}")
            continue

        content, reason = _apply_one(content, change)
        outcomes.append(
            ChangeOutcome(index=index, type=change.type, applied=reason is None, reason=reason)
        )
        if reason:
            logger.debug(f"Skipped {change.type} change {index}: {reason}")

    return EditResult(content=content, outcomes=outcomes)


class EditApplier:
    """Object wrapper over :func:`apply_changes` for injection into the engine."""

    def apply(self, content: str, changes: Iterable[Any]) -> EditResult:
        return apply_changes(content, changes)
