import io
import logging
import unittest

from quizterm.logging_setup import HANDLER_NAME, level_for_verbosity, setup_console_logging


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.root = logging.getLogger()
        self.saved_level = self.root.level
        self.saved_handlers = list(self.root.handlers)

    def tearDown(self) -> None:
        for h in list(self.root.handlers):
            if h not in self.saved_handlers:
                self.root.removeHandler(h)
        self.root.setLevel(self.saved_level)

    def _ours(self):
        return [h for h in self.root.handlers if h.get_name() == HANDLER_NAME]

    def test_verbosity_levels(self) -> None:
        self.assertEqual(level_for_verbosity(0), logging.WARNING)
        self.assertEqual(level_for_verbosity(1), logging.INFO)
        self.assertEqual(level_for_verbosity(3), logging.DEBUG)

    def test_handler_installed_once_and_formats(self) -> None:
        for h in self._ours():
            self.root.removeHandler(h)
        buf = io.StringIO()
        setup_console_logging(logging.WARNING, stream=buf)
        setup_console_logging(logging.DEBUG, stream=io.StringIO())
        self.assertEqual(len(self._ours()), 1)
        self.assertEqual(self._ours()[0].level, logging.DEBUG)

        logging.getLogger("quizterm.test").debug("hello %s", "there")
        self.assertRegex(buf.getvalue(), r"\] DEBUG quizterm\.test: hello there")


if __name__ == "__main__":
    unittest.main()
