"""Test the pager main loop, signals and terminal lifetime."""

import errno
import io
import os
import select
import signal
from unittest.mock import patch

import blessed
import pytest
from centerpager.errors import PagerIOError
from centerpager.keyboard import KeyEvent, KeyType
from centerpager.pager import Pager
from centerpager.terminal import TerminalInterface
from recording_terminal import RecordingTerminal


DOWN = KeyEvent(key_type=KeyType.SPECIAL, value='down', raw='<DOWN>')
UP = KeyEvent(key_type=KeyType.SPECIAL, value='up', raw='<UP>')
QUIT = KeyEvent(key_type=KeyType.REGULAR, value='q', raw='q')
OTHER = KeyEvent(key_type=KeyType.REGULAR, value='x', raw='x')


@pytest.fixture
def two_line_file(tmp_path):
    path = tmp_path / "two.txt"
    path.write_bytes(b"hi\na longer line of text\n")
    return str(path)


def make_pager(path, width=10, height=5):
    terminal = RecordingTerminal(width, height)
    return Pager(path, terminal=terminal), terminal


def stdin_ready(*_args):
    return ([0], [], [])


def test_initial_redraw_happens_before_first_event(two_line_file):
    pager, terminal = make_pager(two_line_file)

    def select_and_check(*_args):
        # The first frame is already on screen when we start waiting
        assert terminal.flush_count == 1
        assert terminal.rows()[0] == "    hi    "
        return ([0], [], [])

    with patch('centerpager.pager.select.select', side_effect=select_and_check):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    assert terminal.setup_count == 1
    assert terminal.cleanup_count == 1


def test_scroll_keys_redraw(two_line_file):
    pager, terminal = make_pager(two_line_file)

    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with patch.object(pager.keyboard, 'get_key_event', side_effect=[DOWN, DOWN, UP, QUIT]):
            pager.run()

    assert pager.state.offset == 1
    # initial + three scroll keys
    assert terminal.flush_count == 4
    assert terminal.rows() == ["ger line o"] + [" " * 10] * 4


def test_unrecognized_keys_do_not_redraw(two_line_file):
    pager, terminal = make_pager(two_line_file)

    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with patch.object(pager.keyboard, 'get_key_event', side_effect=[OTHER, None, OTHER, QUIT]):
            pager.run()

    assert terminal.flush_count == 1


def test_keyboard_read_is_non_blocking_after_select(two_line_file):
    pager, _ = make_pager(two_line_file)

    with patch('centerpager.pager.select.select', side_effect=stdin_ready) as mock_select:
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT) as mock_get_key_event:
            pager.run()

    mock_select.assert_called()
    mock_get_key_event.assert_called_with(timeout=0)


def test_resize_signal_triggers_redraw(two_line_file):
    pager, terminal = make_pager(two_line_file)
    calls = []

    def select_with_resize(*_args):
        calls.append(1)
        if len(calls) == 1:
            terminal.resize(4, 5)
            pager._handle_resize(signal.SIGWINCH, None)
            return ([pager._signal_pipe_r], [], [])
        return ([0], [], [])

    with patch('centerpager.pager.select.select', side_effect=select_with_resize):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    assert terminal.flush_count == 2
    assert pager.state.offset == 0
    assert terminal.rows() == [" hi ", " lin", "    ", "    ", "    "]


def test_resize_signal_with_unchanged_size_does_not_redraw(two_line_file):
    pager, terminal = make_pager(two_line_file)
    calls = []

    def select_with_resize(*_args):
        calls.append(1)
        if len(calls) == 1:
            pager._handle_resize(signal.SIGWINCH, None)
            return ([pager._signal_pipe_r], [], [])
        return ([0], [], [])

    with patch('centerpager.pager.select.select', side_effect=select_with_resize):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    assert terminal.flush_count == 1


def test_sigint_quits(two_line_file):
    pager, terminal = make_pager(two_line_file)

    def select_with_sigint(*_args):
        pager._handle_sigint(signal.SIGINT, None)
        return ([pager._signal_pipe_r], [], [])

    with patch('centerpager.pager.select.select', side_effect=select_with_sigint):
        with patch.object(pager.keyboard, 'get_key_event') as mock_get_key_event:
            pager.run()

    mock_get_key_event.assert_not_called()
    assert pager.running is False
    assert terminal.cleanup_count == 1


def test_teardown_restores_signal_handlers_and_closes_file(two_line_file):
    pager, _ = make_pager(two_line_file)
    before_winch = signal.getsignal(signal.SIGWINCH)
    before_int = signal.getsignal(signal.SIGINT)

    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    assert signal.getsignal(signal.SIGWINCH) == before_winch
    assert signal.getsignal(signal.SIGINT) == before_int
    assert pager.line_source.closed


def test_io_error_still_restores_terminal(two_line_file):
    pager, terminal = make_pager(two_line_file)

    def broken_flush():
        raise PagerIOError("terminal flush failed")

    terminal.flush = broken_flush
    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with pytest.raises(PagerIOError, match="flush"):
            pager.run()

    assert terminal.cleanup_count == 1
    assert pager.line_source.closed


def test_restore_failure_does_not_mask_original_error(two_line_file, caplog):
    pager, terminal = make_pager(two_line_file)

    def broken_flush():
        raise PagerIOError("terminal flush failed")

    def broken_cleanup():
        raise PagerIOError("cannot restore terminal mode")

    terminal.flush = broken_flush
    terminal.cleanup = broken_cleanup
    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with pytest.raises(PagerIOError, match="flush"):
            pager.run()

    assert "cannot restore terminal mode" in caplog.text
    assert pager.line_source.closed


def test_restore_failure_on_clean_exit_is_raised(two_line_file):
    pager, terminal = make_pager(two_line_file)

    def broken_cleanup():
        raise PagerIOError("cannot restore terminal mode")

    terminal.cleanup = broken_cleanup
    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            with pytest.raises(PagerIOError, match="restore"):
                pager.run()


def test_missing_file_fails_before_touching_terminal(tmp_path):
    terminal = RecordingTerminal()
    with pytest.raises(PagerIOError):
        Pager(str(tmp_path / "nope.txt"), terminal=terminal)
    assert terminal.setup_count == 0


def test_raw_mode_wraps_the_event_loop(two_line_file):
    pager, terminal = make_pager(two_line_file)

    with patch('centerpager.pager.select.select', side_effect=stdin_ready):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    terminal.term.raw.assert_called_once_with()
    terminal.term.raw.return_value.__enter__.assert_called_once()
    terminal.term.raw.return_value.__exit__.assert_called_once()


def test_buffered_keys_are_read_without_waiting(two_line_file):
    pager, terminal = make_pager(two_line_file)
    terminal.pending_input = True

    with patch('centerpager.pager.select.select') as mock_select:
        with patch.object(pager.keyboard, 'get_key_event', side_effect=[DOWN, DOWN, QUIT]):
            pager.run()

    mock_select.assert_not_called()
    assert pager.state.offset == 2
    assert terminal.flush_count == 3


def test_incomplete_buffered_sequence_waits_for_more_input(two_line_file):
    pager, terminal = make_pager(two_line_file)
    terminal.pending_input = True

    with patch('centerpager.pager.select.select', side_effect=stdin_ready) as mock_select:
        with patch.object(pager.keyboard, 'get_key_event', side_effect=[None, QUIT]):
            pager.run()

    assert mock_select.call_count == 1
    assert pager.running is False


@pytest.mark.skipif(not hasattr(os, 'openpty'), reason="needs a pseudo-terminal")
def test_keys_arriving_in_one_read_are_all_delivered(two_line_file):
    """Two arrow presses read in a single chunk give two events."""
    master_fd, slave_fd = os.openpty()
    real_select = select.select

    def bounded_select(r, w, x, timeout=None):
        return real_select(r, w, x, 0.5 if timeout is None else timeout)

    try:
        with os.fdopen(slave_fd, 'rb', buffering=0) as slave:
            term = blessed.Terminal(stream=io.StringIO(), force_styling=False)
            terminal = TerminalInterface(term, in_stream=slave)
            pager = Pager(two_line_file, terminal=terminal)
            pager._open_signal_pipe()
            terminal.setup()
            try:
                os.write(master_fd, b"\x1b[B\x1b[B")
                with patch('centerpager.pager.select.select', side_effect=bounded_select):
                    first = pager._next_event()
                    second = pager._next_event()
            finally:
                terminal.cleanup()
                pager._close_signal_pipe()
                pager.line_source.close()
    finally:
        os.close(master_fd)

    assert first == DOWN
    assert second == DOWN


def test_constructing_a_pager_creates_no_pipe(two_line_file):
    pager, _ = make_pager(two_line_file)
    assert pager._signal_pipe_r is None
    assert pager._signal_pipe_w is None
    pager.line_source.close()


def test_signal_pipe_is_closed_after_run(two_line_file):
    pager, _ = make_pager(two_line_file)
    seen = []

    def select_and_record(*_args):
        seen.extend([pager._signal_pipe_r, pager._signal_pipe_w])
        return ([0], [], [])

    with patch('centerpager.pager.select.select', side_effect=select_and_record):
        with patch.object(pager.keyboard, 'get_key_event', return_value=QUIT):
            pager.run()

    assert pager._signal_pipe_r is None
    for fd in seen:
        with pytest.raises(OSError):
            os.fstat(fd)


def test_pipe_failure_still_closes_file(two_line_file):
    pager, terminal = make_pager(two_line_file)
    before_winch = signal.getsignal(signal.SIGWINCH)

    with patch('centerpager.pager.os.pipe', side_effect=OSError(errno.EMFILE, "Too many open files")):
        with pytest.raises(PagerIOError, match="signal pipe"):
            pager.run()

    assert pager.line_source.closed
    assert terminal.setup_count == 0
    assert signal.getsignal(signal.SIGWINCH) == before_winch


def test_terminal_is_built_before_the_file_is_opened(two_line_file):
    with patch('centerpager.pager.TerminalInterface', side_effect=RuntimeError("no terminal")):
        with patch('centerpager.pager.LineSource.open') as mock_open:
            with pytest.raises(RuntimeError):
                Pager(two_line_file)

    mock_open.assert_not_called()
