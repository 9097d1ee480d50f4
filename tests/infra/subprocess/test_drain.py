"""
Tests for single-channel draining.

Tests key drain features including:
- Line splitting and terminator removal
- Decoding of binary channels
- Stream release at end-of-stream and on failure
"""

import io
from unittest.mock import Mock

import pytest

from procinfra.log import TRACE
from procinfra.subprocess import (
    decode_lines,
    drain_stream,
    read_stderr,
    read_stdout,
    split_lines,
)

# =============================================================================
# Test decode_lines() / split_lines()
# =============================================================================


@pytest.mark.unit
class TestDecodeLines:
    """Test decoding and line splitting."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (b"abc\n", ["abc"]),
            (b"abc\r\n", ["abc"]),
            (b"abc\r", ["abc"]),
            (b"abc", ["abc"]),
            (b"\n", [""]),
            ("text\n", ["text"]),
            (b"a\r\r\n", ["a", ""]),
        ],
    )
    def test_strips_one_terminator(self, raw, expected):
        """Test exactly one trailing terminator is removed."""
        assert decode_lines(raw, "utf-8") == expected

    def test_bare_carriage_return_ends_line(self):
        """Test progress style output is split on each \\r."""
        assert decode_lines(b"50%\r100%\n", "utf-8") == ["50%", "100%"]

    def test_split_lines_on_text(self):
        """Test splitting works on already decoded text."""
        assert split_lines("a\rb\rc\r\n") == ["a", "b", "c"]

    def test_decodes_with_given_encoding(self):
        """Test bytes are decoded with the requested codec."""
        assert decode_lines("héllo\n".encode("latin-1"), "latin-1") == ["héllo"]

    def test_invalid_bytes_replaced(self):
        """Test undecodable bytes use the error handler."""
        assert decode_lines(b"a\xffb\n", "utf-8", "replace") == ["a�b"]

    def test_strict_errors_raise(self):
        """Test the strict handler surfaces decode errors."""
        with pytest.raises(UnicodeDecodeError):
            decode_lines(b"a\xffb\n", "utf-8", "strict")


# =============================================================================
# Test drain_stream()
# =============================================================================


@pytest.mark.unit
class TestDrainStream:
    """Test drain_stream() reading until end-of-stream."""

    def test_reads_all_lines_in_order(self):
        """Test every line is captured in the order written."""
        stream = io.BytesIO(b"a\nb\nc\n")
        assert drain_stream(stream, "utf-8") == ("a", "b", "c")

    def test_keeps_final_unterminated_line(self):
        """Test a last line without newline is kept."""
        stream = io.BytesIO(b"a\nlast")
        assert drain_stream(stream, "utf-8") == ("a", "last")

    def test_carriage_return_separated_lines(self):
        """Test lines ended by a bare \\r are captured separately."""
        stream = io.BytesIO(b"10%\r50%\r100%\ndone\n")
        assert drain_stream(stream, "utf-8") == ("10%", "50%", "100%", "done")

    def test_keeps_blank_lines(self):
        """Test empty lines in the middle are not mistaken for end-of-stream."""
        stream = io.BytesIO(b"a\n\n\nb\n")
        assert drain_stream(stream, "utf-8") == ("a", "", "", "b")

    def test_empty_stream(self):
        """Test an immediately closed channel yields no lines."""
        assert drain_stream(io.BytesIO(b""), "utf-8") == ()

    def test_text_stream(self):
        """Test text-mode streams are accepted."""
        assert drain_stream(io.StringIO("x\ny\n")) == ("x", "y")

    def test_closes_stream_at_end(self):
        """Test the stream is released once drained."""
        stream = io.BytesIO(b"a\n")
        drain_stream(stream, "utf-8")
        assert stream.closed

    def test_closes_stream_on_error(self):
        """Test the stream is released and the error propagates."""
        stream = Mock()
        stream.readline.side_effect = [b"a\n", OSError("broken pipe")]
        stream.__enter__ = Mock(return_value=stream)
        stream.__exit__ = Mock(return_value=False)

        with pytest.raises(OSError, match="broken pipe"):
            drain_stream(stream, "utf-8")
        stream.__exit__.assert_called_once()

    def test_traces_each_line(self):
        """Test lines are logged at TRACE with the channel name."""
        lg = Mock()
        lg.isEnabledFor.return_value = True
        drain_stream(io.BytesIO(b"a\nb\n"), "utf-8", channel="stdout", lg=lg)
        assert lg.log.call_count == 2
        lg.log.assert_any_call(TRACE, "a", extra={"channel": "stdout"})

    def test_no_trace_when_disabled(self):
        """Test nothing is logged when TRACE is disabled."""
        lg = Mock()
        lg.isEnabledFor.return_value = False
        drain_stream(io.BytesIO(b"a\n"), "utf-8", lg=lg)
        lg.log.assert_not_called()

    def test_default_logger_used(self, caplog):
        """Test the module logger is used when none is given."""
        caplog.set_level(TRACE, logger="procinfra.subprocess.drain")
        drain_stream(io.BytesIO(b"hello\n"), "utf-8", channel="stderr")
        assert any(
            r.levelno == TRACE and r.getMessage() == "hello" for r in caplog.records
        )


# =============================================================================
# Test read_stdout() / read_stderr()
# =============================================================================


@pytest.mark.unit
class TestSequentialReaders:
    """Test the single-channel convenience readers."""

    def test_read_stdout(self, fake_process):
        """Test stdout is drained on the calling thread."""
        proc = fake_process(stdout=b"one\ntwo\n")
        assert read_stdout(proc, "utf-8") == ("one", "two")

    def test_read_stderr(self, fake_process):
        """Test stderr is drained on the calling thread."""
        proc = fake_process(stderr=b"err\n")
        assert read_stderr(proc, "utf-8") == ("err",)

    def test_unpiped_channel_rejected(self, fake_process):
        """Test a channel that was not piped raises ValueError."""
        proc = fake_process()
        proc.stdout = None
        with pytest.raises(ValueError, match="stdout=PIPE"):
            read_stdout(proc)
