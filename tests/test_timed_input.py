import io
import queue
import threading
import time
import unittest

from quizterm.app.timed_input import AnswerTimeout, Countdown, LineReader, ask_with_deadline


class FeedStream:
    """Iterable input whose lines arrive only when the test pushes them."""

    def __init__(self) -> None:
        self._q: "queue.Queue[object]" = queue.Queue()

    def push(self, line: str) -> None:
        self._q.put(line)

    def close(self) -> None:
        self._q.put(None)

    def __iter__(self):
        while True:
            item = self._q.get()
            if item is None:
                return
            yield item


def wait_queued(reader: LineReader, count: int, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while reader._lines.qsize() < count:
        if time.monotonic() > deadline:
            raise AssertionError(f"reader never queued {count} items")
        time.sleep(0.005)


class LineReaderTests(unittest.TestCase):
    def test_reads_lines_then_eof(self) -> None:
        reader = LineReader(io.StringIO("first\r\nsecond\n"))
        self.assertEqual(reader.read(timeout=2), "first")
        self.assertEqual(reader.read(timeout=2), "second")
        with self.assertRaises(EOFError):
            reader.read(timeout=2)
        with self.assertRaises(EOFError):
            reader.read(timeout=2)

    def test_timeout_abandons_read_and_late_lines_can_be_dropped(self) -> None:
        stream = FeedStream()
        reader = LineReader(stream)
        with self.assertRaises(AnswerTimeout):
            reader.read(timeout=0.05)
        self.assertTrue(reader.abandoned)
        stream.push("late\n")
        wait_queued(reader, 1)
        self.assertEqual(reader.discard_pending(), 1)
        self.assertFalse(reader.abandoned)
        stream.push("fresh\n")
        self.assertEqual(reader.read(timeout=2), "fresh")
        stream.close()

    def test_discard_keeps_end_of_input(self) -> None:
        reader = LineReader(io.StringIO("left over\n"))
        reader.start()
        wait_queued(reader, 2)
        self.assertEqual(reader.discard_pending(), 1)
        with self.assertRaises(EOFError):
            reader.read(timeout=2)


class CountdownTests(unittest.TestCase):
    def test_ticks_down_to_zero(self) -> None:
        ticks = []
        done = threading.Event()

        def on_tick(left: int) -> None:
            ticks.append(left)
            if left == 0:
                done.set()

        Countdown(3, on_tick, interval=0.01).start()
        self.assertTrue(done.wait(2))
        self.assertEqual(ticks, [2, 1, 0])

    def test_cancel_stops_ticks(self) -> None:
        ticks = []
        countdown = Countdown(100, ticks.append, interval=10).start()
        countdown.cancel()
        self.assertTrue(countdown.cancelled)
        self.assertEqual(ticks, [])


class AskWithDeadlineTests(unittest.TestCase):
    def test_answer_before_deadline(self) -> None:
        reader = LineReader(io.StringIO("B\n"))
        countdown = Countdown(30, lambda left: None, interval=10)
        outcome = ask_with_deadline(reader, 5, countdown)
        self.assertFalse(outcome.timed_out)
        self.assertEqual(outcome.text, "B")
        self.assertTrue(countdown.cancelled)

    def test_deadline_passes(self) -> None:
        stream = FeedStream()
        reader = LineReader(stream)
        countdown = Countdown(1, lambda left: None, interval=10)
        outcome = ask_with_deadline(reader, 0.05, countdown)
        self.assertTrue(outcome.timed_out)
        self.assertEqual(outcome.text, "")
        self.assertTrue(countdown.cancelled)
        stream.close()

    def test_line_typed_after_timeout_does_not_answer_next_prompt(self) -> None:
        stream = FeedStream()
        reader = LineReader(stream)
        self.assertTrue(ask_with_deadline(reader, 0.05).timed_out)
        stream.push("A\n")
        wait_queued(reader, 1)
        self.assertTrue(ask_with_deadline(reader, 0.05).timed_out)
        stream.push("B\n")
        self.assertEqual(ask_with_deadline(reader, 2).text, "B")
        stream.close()

    def test_type_ahead_after_an_answer_is_kept(self) -> None:
        reader = LineReader(io.StringIO("A\nB\n"))
        self.assertEqual(ask_with_deadline(reader, 2).text, "A")
        self.assertEqual(ask_with_deadline(reader, 2).text, "B")

    def test_eof_propagates(self) -> None:
        with self.assertRaises(EOFError):
            ask_with_deadline(LineReader(io.StringIO("")), 1)


if __name__ == "__main__":
    unittest.main()
