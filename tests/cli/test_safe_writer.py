"""Unit tests for the SafeWriter class in the fs-tools CLI."""

import errno
import io
from unittest.mock import MagicMock, patch

import pytest

from fs_tools.cli.safe_writer import SafeWriter


@pytest.fixture
def mock_signals():
    """Create a mock for signal handler checks."""
    with patch("fs_tools.cli.safe_writer.signal_handler") as mock:
        mock.output_closed.return_value = False
        mock.stop_requested.return_value = False
        yield mock


def test_write_to_stream(mock_signals):
    stream = io.StringIO()
    with SafeWriter(stream) as writer:
        writer.write("tree/")
        writer.write_line("")
        writer.write_line("└── a")
    assert stream.getvalue() == "tree/\n└── a\n"
    # Streams passed in are left open for their owner
    assert not stream.closed


def test_write_to_path(mock_signals, tmp_path):
    target = tmp_path / "out.txt"
    with SafeWriter(target) as writer:
        writer.write_line("project/")
    assert writer._stream.closed
    assert target.read_text(encoding="utf-8") == "project/\n"


def test_write_to_path_string(mock_signals, tmp_path):
    target = tmp_path / "out.txt"
    with SafeWriter(str(target)) as writer:
        writer.write_line("├── docs/")
    assert target.read_text(encoding="utf-8") == "├── docs/\n"


def test_invalid_target():
    with pytest.raises(TypeError, match="Expected a text stream, str, or PathLike, got int"):
        SafeWriter(3)


def test_write_after_close(mock_signals):
    writer = SafeWriter(io.StringIO())
    writer.close()
    with pytest.raises(ValueError, match="closed SafeWriter"):
        writer.write("x")


def test_close_twice(mock_signals, tmp_path):
    writer = SafeWriter(tmp_path / "out.txt")
    writer.close()
    writer.close()


def test_sigpipe_stops_writing(mock_signals):
    mock_signals.output_closed.return_value = True
    stream = io.StringIO()
    writer = SafeWriter(stream)
    with pytest.raises(BrokenPipeError):
        writer.write("data")
    assert stream.getvalue() == ""


def test_sigint_stops_interruptible_writer(mock_signals):
    mock_signals.stop_requested.return_value = True
    with pytest.raises(BrokenPipeError):
        SafeWriter(io.StringIO()).write("data")


def test_sigint_does_not_stop_summary_writer(mock_signals):
    mock_signals.stop_requested.return_value = True
    stream = io.StringIO()
    SafeWriter(stream, interruptible=False).write_line("Copy interrupted:")
    assert stream.getvalue() == "Copy interrupted:\n"


def test_sigpipe_stops_summary_writer(mock_signals):
    mock_signals.output_closed.return_value = True
    with pytest.raises(BrokenPipeError):
        SafeWriter(io.StringIO(), interruptible=False).write("data")


def test_epipe_becomes_broken_pipe(mock_signals):
    stream = MagicMock()
    stream.write.side_effect = OSError(errno.EPIPE, "Broken pipe")
    with pytest.raises(BrokenPipeError):
        SafeWriter(stream).write("data")


def test_other_os_errors_propagate(mock_signals):
    stream = MagicMock()
    stream.write.side_effect = OSError(errno.ENOSPC, "No space left on device")
    with pytest.raises(OSError) as excinfo:
        SafeWriter(stream).write("data")
    assert excinfo.value.errno == errno.ENOSPC


def test_exit_does_not_mask_original_exception(mock_signals, tmp_path):
    writer = SafeWriter(tmp_path / "out.txt")
    writer._stream = MagicMock()
    writer._stream.close.side_effect = OSError(errno.EIO, "I/O error")
    with pytest.raises(RuntimeError):
        with writer:
            raise RuntimeError("boom")
