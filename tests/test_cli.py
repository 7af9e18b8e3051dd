import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from quizterm import __version__
from quizterm.app.cli import main


def run_cli(*argv: str):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()


class CliTests(unittest.TestCase):
    def test_version(self) -> None:
        code, out, _ = run_cli("--version")
        self.assertEqual(code, 0)
        self.assertIn(__version__, out)

    def test_list_categories_uses_packaged_bank(self) -> None:
        code, out, _ = run_cli("list-categories")
        self.assertEqual(code, 0)
        self.assertIn("programming: easy (2), medium (2), hard (2)", out)
        self.assertIn("mathematics:", out)

    def test_show_config_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.json"
            path.write_text(json.dumps({"maxQuestions": 7}), encoding="utf-8")
            code, out, _ = run_cli("--config", str(path), "show-config")
        self.assertEqual(code, 0)
        self.assertIn("maxQuestions: 7", out)
        self.assertIn("timeLimit: 30", out)

    def test_bad_bank_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bank.json"
            path.write_text("[1, 2]", encoding="utf-8")
            code, _, err = run_cli("--bank", str(path), "list-categories")
        self.assertEqual(code, 1)
        self.assertIn("ERROR", err)


if __name__ == "__main__":
    unittest.main()
