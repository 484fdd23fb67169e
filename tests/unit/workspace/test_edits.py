"""Unit tests for thought.workspace.edits module."""

import pytest

from thought.workspace.edits import (
    AppendChange,
    EditApplier,
    InsertAtLineChange,
    MalformedChange,
    PrependChange,
    ReplaceChange,
    apply_changes,
    parse_change,
)


@pytest.mark.unit
class TestReplace:
    """Tests for replace changes."""

    def test_replaces_only_first_occurrence(self):
        result = apply_changes("aa", [{"type": "replace", "old": "a", "new": "b"}])
        assert result.content == "ba"
        assert result.applied_count == 1

    def test_repeated_entries_replace_successive_occurrences(self):
        change = {"type": "replace", "old": "a", "new": "b"}
        assert apply_changes("aaa", [change, change]).content == "bba"

    def test_missing_target_is_skipped_as_not_found(self):
        result = apply_changes("hello", [{"type": "replace", "old": "xyz", "new": "q"}])
        assert result.content == "hello"
        assert result.outcomes[0].reason == "not_found"

    def test_empty_new_deletes_text(self):
        result = apply_changes("hello world", [{"type": "replace", "old": " world", "new": ""}])
        assert result.content == "hello"

    @pytest.mark.parametrize(
        "change",
        [
            {"type": "replace", "new": "b"},
            {"type": "replace", "old": "a"},
            {"type": "replace", "old": "", "new": "b"},
        ],
    )
    def test_missing_fields_are_skipped(self, change):
        result = apply_changes("abc", [change])
        assert result.content == "abc"
        assert result.outcomes[0].applied is False
        assert result.outcomes[0].reason == "missing_field"


@pytest.mark.unit
class TestAppendPrepend:
    """Tests for append and prepend changes."""

    def test_append(self):
        assert apply_changes("1", [{"type": "append", "content": "2"}]).content == "12"

    def test_prepend(self):
        assert apply_changes("world", [{"type": "prepend", "content": "hello "}]).content == "hello world"

    def test_empty_content_is_missing_field(self):
        result = apply_changes("x", [{"type": "append", "content": ""}])
        assert result.outcomes[0].reason == "missing_field"


@pytest.mark.unit
class TestInsertAtLine:
    """Tests for insert_at_line changes."""

    def test_insert_at_start(self):
        result = apply_changes("b\nc", [{"type": "insert_at_line", "line": 0, "content": "a"}])
        assert result.content == "a\nb\nc"

    def test_insert_in_middle(self):
        result = apply_changes("a\nc", [{"type": "insert_at_line", "line": 1, "content": "b"}])
        assert result.content == "a\nb\nc"

    def test_insert_at_line_count_appends_line(self):
        result = apply_changes("a\nb", [{"type": "insert_at_line", "line": 2, "content": "c"}])
        assert result.content == "a\nb\nc"

    def test_out_of_range_line_leaves_content_unchanged(self):
        content = "one\ntwo\nthree"
        result = apply_changes(content, [{"type": "insert_at_line", "line": 100, "content": "x"}])
        assert result.content == content
        assert result.outcomes[0].reason == "line_out_of_range"

    def test_negative_line_is_out_of_range(self):
        result = apply_changes("a", [{"type": "insert_at_line", "line": -1, "content": "x"}])
        assert result.content == "a"
        assert result.outcomes[0].reason == "line_out_of_range"

    def test_missing_line_is_missing_field(self):
        result = apply_changes("a", [{"type": "insert_at_line", "content": "x"}])
        assert result.outcomes[0].reason == "missing_field"


@pytest.mark.unit
class TestOrderingAndLeniency:
    """Tests for ordered application and skip reporting."""

    def test_changes_apply_to_result_of_previous_change(self):
        changes = [
            {"type": "append", "content": "\nworld"},
            {"type": "replace", "old": "world", "new": "there"},
            {"type": "prepend", "content": "> "},
        ]
        assert apply_changes("hello", changes).content == "> hello\nthere"

    def test_order_is_significant(self):
        first = [{"type": "append", "content": "x"}, {"type": "replace", "old": "x", "new": "y"}]
        second = list(reversed(first))
        assert apply_changes("", first).content == "y"
        assert apply_changes("", second).content == "x"

    def test_malformed_entries_are_reported_and_skipped(self):
        changes = [
            "not a dict",
            {"type": "rewrite", "content": "x"},
            {"type": "insert_at_line", "line": "abc", "content": "x"},
            {"type": "append", "content": "!"},
        ]
        result = apply_changes("hi", changes)

        assert result.content == "hi!"
        assert [o.reason for o in result.outcomes] == [
            "not_an_object",
            "unknown_type",
            "invalid_field",
            None,
        ]
        assert [o.index for o in result.skipped] == [0, 1, 2]
        assert result.applied_count == 1

    def test_typed_changes_are_accepted(self):
        changes = [
            ReplaceChange(old="a", new="b"),
            AppendChange(content="c"),
            PrependChange(content="0"),
            InsertAtLineChange(line=1, content="z"),
        ]
        assert apply_changes("a", changes).content == "0bc\nz"

    def test_empty_change_list_is_a_no_op(self):
        result = apply_changes("same", [])
        assert result.content == "same"
        assert result.outcomes == []

    def test_parse_change_never_raises(self):
        assert isinstance(parse_change(None), MalformedChange)
        assert isinstance(parse_change({"old": "a"}), MalformedChange)
        assert isinstance(parse_change({"type": "append", "content": "x"}), AppendChange)

    def test_edit_applier_delegates(self):
        result = EditApplier().apply("a", [{"type": "append", "content": "b"}])
        assert result.content == "ab"
