from __future__ import annotations

"""Deadline-bounded line input for the terminal quiz.

A question's answer window is a race between a line read and a timeout.
`LineReader` owns one daemon thread that moves input lines into a queue, so
a read that loses the race is simply abandoned: the thread stays alive and
serves the next read. `Countdown` is a cancellable ticker for the on-screen
timer. `ask_with_deadline` composes the two and yields exactly one outcome.
"""

import queue
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

_EOF = object()


class AnswerTimeout(Exception):
    """The deadline passed before a line was read."""


class LineReader:
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self._lines: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._eof = False
        self._abandoned = False

    def _pump(self) -> None:
        try:
            for line in self.stream:
                self._lines.put(line.rstrip("\r\n"))
        finally:
            self._lines.put(_EOF)

    def start(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._pump, name="quizterm-stdin", daemon=True)
            self._thread.start()

    @property
    def abandoned(self) -> bool:
        """True when the last read timed out and nothing has been read since."""
        return self._abandoned

    def read(self, timeout: Optional[float] = None) -> str:
        """Next input line.

        Raises:
            AnswerTimeout: `timeout` seconds passed without a line.
            EOFError: input is exhausted.
        """
        if self._eof:
            raise EOFError("input closed")
        self.start()
        try:
            item = self._lines.get(timeout=timeout)
        except queue.Empty:
            self._abandoned = True
            raise AnswerTimeout() from None
        self._abandoned = False
        if item is _EOF:
            self._eof = True
            raise EOFError("input closed")
        return str(item)

    def discard_pending(self) -> int:
        """Drop queued lines; returns how many were dropped.

        End of input is kept: the next read still raises EOFError.
        """
        dropped = 0
        while True:
            try:
                item = self._lines.get_nowait()
            except queue.Empty:
                break
            if item is _EOF:
                self._eof = True
                break
            dropped += 1
        self._abandoned = False
        return dropped


class Countdown:
    """Calls `on_tick(seconds_left)` once per `interval` until cancelled or expired."""

    def __init__(self, seconds: int, on_tick: Callable[[int], None], interval: float = 1.0) -> None:
        self.seconds = int(seconds)
        self.on_tick = on_tick
        self.interval = interval
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        left = self.seconds
        while left > 0:
            if self._cancelled.wait(self.interval):
                return
            left -= 1
            self.on_tick(left)

    def start(self) -> "Countdown":
        self._thread = threading.Thread(target=self._run, name="quizterm-countdown", daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._cancelled.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval * 2)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


@dataclass(frozen=True)
class TimedAnswer:
    text: str
    timed_out: bool
    elapsed: float


def ask_with_deadline(
    reader: LineReader,
    time_limit: Optional[float],
    countdown: Optional[Countdown] = None,
    clock: Callable[[], float] = time.monotonic,
) -> TimedAnswer:
    """Wait for one line or the deadline, whichever comes first.

    The loser is cancelled: the countdown stops when a line arrives, and the
    pending read is abandoned when time runs out. Lines that arrive after an
    abandoned read belong to the timed-out prompt and are dropped before this
    read starts. EOFError propagates.
    """
    if reader.abandoned:
        reader.discard_pending()
    started = clock()
    if countdown is not None:
        countdown.start()
    try:
        text = reader.read(timeout=time_limit)
    except AnswerTimeout:
        return TimedAnswer(text="", timed_out=True, elapsed=clock() - started)
    finally:
        if countdown is not None:
            countdown.cancel()
    return TimedAnswer(text=text, timed_out=False, elapsed=clock() - started)
