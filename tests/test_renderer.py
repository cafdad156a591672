"""Tests for gallows.term.renderer -- registry, clear/draw cycle, input line."""

from __future__ import annotations

import threading

import pytest

from gallows.term.ansi import (
    CLEAR,
    CLEAR_ROW_AND_UP,
    CLEAR_TO_END,
    CR,
    DOWN,
    RESTORE,
    SAVE,
    UP,
)
from gallows.term.line import (
    Line,
    inline_from_generator,
    line_from_generator,
    spacer,
)
from gallows.term.renderer import Renderer
from gallows.term.sink import SinkClosedError

from .fakes import BufferSink


def static(text: bytes) -> Line:
    return line_from_generator(lambda: text)


class CountingProducer:
    """Producer that records how often it was called."""

    def __init__(self, text: bytes | None) -> None:
        self.text = text
        self.calls = 0

    def __call__(self) -> bytes | None:
        self.calls += 1
        return self.text


def draw_once(renderer: Renderer, sink: BufferSink) -> bytes:
    sink.clear()
    renderer.draw()
    return sink.output


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_add_line_appends_visible_with_zero_balance(self) -> None:
        r = Renderer(BufferSink())
        a, b = static(b"a"), static(b"b")
        r.add_line(a)
        r.add_line(b)
        assert r.line_count == 2
        assert not r.is_hidden(a)
        assert r.clear_balance_of(b) == 0

    def test_remove_only_line_empties_registry(self) -> None:
        r = Renderer(BufferSink())
        a = static(b"a")
        r.add_line(a)
        r.remove_line(a)
        assert r.line_count == 0

    def test_remove_on_single_line_registry_drops_everything(self) -> None:
        r = Renderer(BufferSink())
        r.add_line(static(b"a"))
        r.remove_line(static(b"not registered"))
        assert r.line_count == 0

    def test_remove_preserves_order_of_the_rest(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        a, b, c = static(b"a"), static(b"b"), static(b"c")
        for line in (a, b, c):
            r.add_line(line)
        r.remove_line(b)
        assert r.line_count == 2
        assert draw_once(r, sink) == CLEAR + b"a\n" + CLEAR + b"c\n"

    def test_remove_unknown_line_is_noop(self) -> None:
        r = Renderer(BufferSink())
        r.add_line(static(b"a"))
        r.add_line(static(b"b"))
        r.remove_line(static(b"a"))
        assert r.line_count == 2

    def test_lines_are_matched_by_identity(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        producer = CountingProducer(b"same")
        first, second = line_from_generator(producer), line_from_generator(producer)
        r.add_line(first)
        r.add_line(second)
        r.hide_line(second)
        assert not r.is_hidden(first)
        assert r.is_hidden(second)

    def test_remove_keeps_hidden_flags_aligned(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        a, b, c = static(b"a"), static(b"b"), static(b"c")
        for line in (a, b, c):
            r.add_line(line)
        r.hide_line(c)
        r.remove_line(a)
        assert draw_once(r, sink) == CLEAR + b"b\n"

    def test_hide_and_show_unknown_lines_are_noops(self) -> None:
        r = Renderer(BufferSink())
        r.hide_line(static(b"x"))
        r.show_line(static(b"x"))
        r.add_line(static(b"a"))
        r.hide_line(static(b"x"))
        r.show_line(static(b"x"))
        assert r.line_count == 1


# ---------------------------------------------------------------------------
# Render cycle
# ---------------------------------------------------------------------------


class TestDrawCycle:
    def test_first_draw_has_no_clear_pass(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        assert draw_once(r, sink) == CLEAR + b"X\n"
        assert r.cursor == 1

    def test_second_draw_clears_previous_row_first(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.draw()
        assert draw_once(r, sink) == CR + CLEAR + UP + CLEAR + b"X\n"
        assert r.cursor == 1

    def test_clear_pass_walks_lines_last_to_first(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"one"))
        r.add_line(static(b"two"))
        r.draw()
        out = draw_once(r, sink)
        assert out == (
            CLEAR_ROW_AND_UP * 2 + CLEAR + b"one\n" + CLEAR + b"two\n"
        )
        assert r.cursor == 2

    def test_static_content_does_not_drift(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        for text in (b"alpha", b"beta", b"gamma"):
            r.add_line(static(text))
        for _ in range(10):
            r.draw()
        out = sink.output
        # Every row drawn before the last cycle has been walked back over
        assert out.count(UP) == out.count(b"\n") - 3
        assert r.cursor == 3

    def test_absent_content_draws_row_without_balance(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        line = line_from_generator(lambda: None)
        r.add_line(line)
        assert draw_once(r, sink) == CLEAR + b"\n"
        assert r.clear_balance_of(line) == 0
        assert r.cursor == 1

    def test_spacer_is_not_written(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        line = spacer()
        r.add_line(line)
        assert draw_once(r, sink) == CLEAR + b"\n"
        assert r.clear_balance_of(line) == 0

    def test_inline_line_has_no_newline_and_no_clear(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"row"))
        tail = inline_from_generator(lambda: b"tail")
        r.add_line(tail)
        assert draw_once(r, sink) == CLEAR + b"row\n" + CLEAR + b"tail"
        assert r.cursor == 1
        # The inline line never walks the cursor back; only the row does
        assert draw_once(r, sink) == CLEAR_ROW_AND_UP + CLEAR + b"row\n" + CLEAR + b"tail"

    def test_balance_tracks_drawn_rows(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        line = static(b"x")
        r.add_line(line)
        r.draw()
        assert r.clear_balance_of(line) == 1
        r.draw()
        assert r.clear_balance_of(line) == 1


class TestHideShow:
    def test_hidden_line_is_never_produced(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        producer = CountingProducer(b"secret")
        line = line_from_generator(producer)
        r.add_line(static(b"visible"))
        r.add_line(line)
        r.hide_line(line)
        r.draw()
        r.draw()
        assert producer.calls == 0
        assert r.clear_balance_of(line) == 0
        assert b"secret" not in sink.output

    def test_hiding_after_draw_clears_the_row_once(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        line = static(b"gone")
        r.add_line(line)
        r.draw()
        r.hide_line(line)
        assert draw_once(r, sink) == CLEAR_ROW_AND_UP
        assert r.cursor == 0
        assert r.clear_balance_of(line) == 0
        assert draw_once(r, sink) == b""

    def test_show_restores_previous_behavior(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        line = static(b"X")
        r.add_line(line)
        r.draw()
        before = draw_once(r, sink)

        r.hide_line(line)
        r.draw()
        r.show_line(line)
        r.draw()

        assert draw_once(r, sink) == before


class TestHadInput:
    def test_one_input_adds_one_compensation(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.draw()
        r.had_input()
        assert r.cursor == 2
        assert r.off_the_bottom == 1

        out = draw_once(r, sink)
        assert out == CLEAR_ROW_AND_UP * 2 + CLEAR + b"X\n"
        assert r.off_the_bottom == 0
        assert r.cursor == 1

    def test_several_inputs_are_compensated_in_one_write(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.draw()
        for _ in range(3):
            r.had_input()
        sink.clear()
        r.draw()
        assert sink.writes[0] == CLEAR_ROW_AND_UP * 3
        assert r.cursor == 1

    def test_input_before_first_draw(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.had_input()
        assert draw_once(r, sink) == CLEAR_ROW_AND_UP + CLEAR + b"X\n"
        assert r.cursor == 1

    def test_empty_registry_resets_cursor(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.draw()
        assert r.cursor == 0
        assert sink.output == b""


class TestInputLine:
    def make(self) -> tuple[Renderer, BufferSink, Line]:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"S"))
        prompt = r.create_input_line(">")
        r.add_line(prompt)
        return r, sink, prompt

    def test_create_does_not_register(self) -> None:
        r = Renderer(BufferSink())
        line = r.create_input_line(">")
        assert r.line_count == 0
        assert not line.options.with_next_line
        assert line.options.manual_cleanup is not None

    def test_first_draw(self) -> None:
        r, sink, prompt = self.make()
        assert draw_once(r, sink) == CLEAR + b"S\n" + CLEAR + DOWN + b"> "
        assert r.cursor == 1
        assert r.clear_balance_of(prompt) == 1

    def test_redraw_uses_manual_cleanup_and_restores(self) -> None:
        r, sink, _ = self.make()
        r.draw()
        out = draw_once(r, sink)
        cleanup = SAVE + DOWN + CR + CLEAR + UP + UP
        assert out == (
            cleanup
            + CLEAR_ROW_AND_UP
            + CLEAR + b"S\n"
            + CLEAR + DOWN + b"> " + RESTORE
        )
        assert r.cursor == 1

    def test_input_clears_echo_instead_of_restoring(self) -> None:
        r, sink, _ = self.make()
        r.draw()
        r.draw()
        r.had_input()
        out = draw_once(r, sink)
        assert out.startswith(CLEAR_ROW_AND_UP + SAVE)
        assert out.endswith(CLEAR + DOWN + b"> " + CLEAR_TO_END)
        assert RESTORE not in out
        assert r.cursor == 1

        # Position saved by the following cleanup is restored again
        assert draw_once(r, sink).endswith(b"> " + RESTORE)

    def test_prompt_symbol_is_utf8(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(r.create_input_line("»"))
        r.draw()
        assert "» ".encode("utf-8") in sink.output


class TestSinkFailure:
    def test_failure_propagates_and_stops_the_cycle(self) -> None:
        sink = BufferSink(fail_after=1)
        r = Renderer(sink)
        line = static(b"X")
        r.add_line(line)
        r.add_line(static(b"Y"))
        with pytest.raises(SinkClosedError):
            r.draw()
        assert sink.output == CLEAR
        assert r.clear_balance_of(line) == 0
        assert r.cursor == 0

    def test_failure_in_clear_pass_propagates(self) -> None:
        sink = BufferSink(fail_after=3)
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.draw()
        with pytest.raises(SinkClosedError):
            r.draw()


class TestLocking:
    def test_had_input_waits_for_a_draw_in_progress(self) -> None:
        sink = BufferSink()
        r = Renderer(sink)
        r.add_line(static(b"X"))
        r.draw()

        started = threading.Event()
        release = threading.Event()
        done = threading.Event()

        def blocking() -> bytes:
            started.set()
            assert release.wait(5)
            return b"slow"

        r.add_line(line_from_generator(blocking))

        drawer = threading.Thread(target=r.draw)
        drawer.start()
        assert started.wait(5)

        def typist() -> None:
            r.had_input()
            done.set()

        inputs = threading.Thread(target=typist)
        inputs.start()
        try:
            assert not done.wait(0.1)
            assert r._lock.locked()
        finally:
            release.set()
            drawer.join(5)
            inputs.join(5)

        assert not drawer.is_alive()
        assert not inputs.is_alive()
        assert done.is_set()
        # The draw finished with two rows on screen; the input landed after it
        assert r.cursor == 3
        assert r.off_the_bottom == 1

    def test_counters_are_read_under_the_lock(self) -> None:
        r = Renderer(BufferSink())
        r.add_line(static(b"X"))

        started = threading.Event()
        release = threading.Event()
        seen: list[tuple[int, int, int]] = []

        def blocking() -> bytes:
            started.set()
            assert release.wait(5)
            return b"slow"

        r.add_line(line_from_generator(blocking))

        drawer = threading.Thread(target=r.draw)
        drawer.start()
        assert started.wait(5)

        reader = threading.Thread(
            target=lambda: seen.append((r.cursor, r.off_the_bottom, r.line_count))
        )
        reader.start()
        try:
            reader.join(0.1)
            assert reader.is_alive()
            assert seen == []
        finally:
            release.set()
            drawer.join(5)
            reader.join(5)

        assert seen == [(2, 0, 2)]
