import io

import pytest

from tasktree.tasks.output import ANSI_ATTR_BRIGHT, ANSI_FG_RED, ANSI_RESET, OutputSink


class FakeTerminal(io.StringIO):
    def isatty(self):
        return True


def test_for_stream_auto_detects_terminal():
    assert OutputSink.for_stream(FakeTerminal()).styled
    assert not OutputSink.for_stream(io.StringIO()).styled


def test_for_stream_forced_modes():
    assert OutputSink.for_stream(io.StringIO(), "always").styled
    assert not OutputSink.for_stream(FakeTerminal(), "never").styled


def test_for_stream_rejects_unknown_mode():
    with pytest.raises(ValueError, match="Unknown color mode"):
        OutputSink.for_stream(io.StringIO(), "sometimes")


def test_disabled_sink_drops_writes():
    sink = OutputSink.disabled()

    sink.write("text")
    sink.failure("[FAIL]\n")

    assert not sink.enabled
    assert not OutputSink.for_stream(None).enabled


def test_plain_sink_writes_raw_text():
    stream = io.StringIO()
    sink = OutputSink(stream)

    sink.bright("header\n")
    sink.success("[OK]\n")

    assert stream.getvalue() == "header\n[OK]\n"


def test_styled_sink_wraps_text():
    stream = io.StringIO()
    sink = OutputSink(stream, styled=True)

    sink.bright("x")
    sink.failure("y")

    assert stream.getvalue() == (
        f"{ANSI_RESET}{ANSI_ATTR_BRIGHT}x{ANSI_RESET}" f"{ANSI_RESET}{ANSI_FG_RED}y{ANSI_RESET}"
    )
