"""
Tests for ProcessResult.
"""

import dataclasses

import pytest

from procinfra.subprocess import ProcessResult


@pytest.mark.unit
class TestProcessResult:
    """Test the immutable result snapshot."""

    def test_lists_are_frozen_to_tuples(self):
        """Test sequences passed in are stored as tuples."""
        result = ProcessResult(0, ["a", "b"], ["c"])
        assert result.stdout == ("a", "b")
        assert result.stderr == ("c",)

    def test_cannot_be_mutated(self):
        """Test assigning a field raises."""
        result = ProcessResult(0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.exit_code = 1  # type: ignore[misc]

    def test_ok_reflects_exit_code(self):
        """Test ok is True only for exit code 0."""
        assert ProcessResult(0).ok
        assert not ProcessResult(1).ok
        assert not ProcessResult(-9).ok

    def test_joined_text(self):
        """Test out and err join lines with newlines."""
        result = ProcessResult(0, ["a", "b"], ["x"])
        assert result.out == "a\nb"
        assert result.err == "x"

    def test_output_prefers_stdout(self):
        """Test output uses stdout when it has lines."""
        assert ProcessResult(1, ["out"], ["err"]).output == "out"

    def test_output_falls_back_to_stderr(self):
        """Test output uses stderr when stdout is empty."""
        assert ProcessResult(1, [], ["boom"]).output == "boom"
        assert ProcessResult(1).output == ""

    def test_equality(self):
        """Test results with equal fields compare equal."""
        assert ProcessResult(0, ["a"], []) == ProcessResult(0, ("a",), ())
