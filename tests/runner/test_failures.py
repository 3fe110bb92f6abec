"""Tests for error synthesis from failing results."""

import pytest

from taprunner.runner.failures import UNNAMED_ERROR, UNSET, TestError, synthesize_error
from taprunner.tap.models import TapResult


def _failing(name: str = "broken", diag: dict | None = None) -> TapResult:
    return TapResult(ok=False, number=1, name=name, diag=diag)


class TestPassThrough:
    """Pre-built error values in diagnostics."""

    def test_given_diag_error_when_synthesize_then_returns_it_unchanged(self) -> None:
        """A producer-supplied error object wins over everything else."""
        prebuilt = {"message": "from producer", "code": "E42"}

        result = synthesize_error(_failing(diag={"error": prebuilt, "found": 1}))

        assert result is prebuilt


class TestMessage:
    """Message derivation from the result name."""

    def test_given_error_prefix_when_synthesize_then_prefix_stripped(self) -> None:
        """The stringified error carries the prefix back exactly once."""
        err = synthesize_error(_failing("Error: x"))

        assert err.message == "x"
        assert str(err) == "Error: x"

    def test_given_double_prefix_when_synthesize_then_only_first_stripped(self) -> None:
        """Only one leading prefix is removed."""
        err = synthesize_error(_failing("Error: Error: x"))

        assert err.message == "Error: x"

    def test_given_empty_name_when_synthesize_then_placeholder(self) -> None:
        """Unnamed failures get a placeholder message."""
        err = synthesize_error(_failing(""))

        assert err.message == UNNAMED_ERROR
        assert str(err) == "Error: (unnamed error)"

    def test_given_no_diag_when_synthesize_then_bare_error(self) -> None:
        """Results without diagnostics still produce an error."""
        err = synthesize_error(_failing("plain", diag=None))

        assert isinstance(err, TestError)
        assert err.message == "plain"
        assert err.stack is None
        assert err.actual is UNSET
        assert err.expected is UNSET
        assert err.show_diff is False


class TestStack:
    """Stack derivation from the diag stack field."""

    def test_given_string_stack_when_synthesize_then_used_verbatim(self) -> None:
        """String stacks are not reformatted."""
        err = synthesize_error(_failing(diag={"stack": "boom"}))

        assert err.stack == "boom"

    def test_given_list_stack_when_synthesize_then_frames_prefixed(self) -> None:
        """Frame lists are joined under the error line."""
        err = synthesize_error(_failing("Error: x", diag={"stack": ["a", "b"]}))

        assert err.message == "x"
        assert err.stack == "Error: x\n    at a\n    at b"

    def test_given_unsupported_stack_type_when_synthesize_then_no_stack(self) -> None:
        """Stacks that are neither text nor frames are dropped."""
        err = synthesize_error(_failing(diag={"stack": 42}))

        assert err.stack is None


class TestActualExpected:
    """found/wanted handling is by presence, not truthiness."""

    def test_given_found_and_wanted_when_synthesize_then_diff_enabled(self) -> None:
        """Both sides present turns on the diff."""
        err = synthesize_error(_failing(diag={"found": 1, "wanted": 2}))

        assert err.actual == 1
        assert err.expected == 2
        assert err.show_diff is True

    @pytest.mark.parametrize(
        ("diag", "has_actual", "has_expected"),
        [
            ({"found": None}, True, False),
            ({"wanted": 0}, False, True),
            ({"found": "", "wanted": False}, True, True),
        ],
    )
    def test_given_falsy_values_when_synthesize_then_presence_counts(
        self, diag: dict, has_actual: bool, has_expected: bool
    ) -> None:
        """None, 0, "" and False still count as present."""
        err = synthesize_error(_failing(diag=diag))

        assert err.has_actual is has_actual
        assert err.has_expected is has_expected
        assert err.show_diff is (has_actual and has_expected)

    def test_given_only_found_when_synthesize_then_expected_unset(self) -> None:
        """One side alone never enables the diff."""
        err = synthesize_error(_failing(diag={"found": [1, 2]}))

        assert err.actual == [1, 2]
        assert err.expected is UNSET
        assert not err.show_diff
