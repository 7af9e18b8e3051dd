import json
import tempfile
import unittest
from pathlib import Path

from quizterm.config import CONFIG_KEYS, Configuration
from quizterm.errors import InvalidConfigValue, UnknownKey


class ConfigurationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cfg = Configuration()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults(self) -> None:
        self.assertEqual(self.cfg.get("timeLimit"), 30)
        self.assertIs(self.cfg.get("shuffleQuestions"), True)
        self.assertEqual(self.cfg.get("max_questions"), 5)
        self.assertEqual(self.cfg.get("categories"), ["programming", "mathematics"])
        self.assertEqual(
            set(CONFIG_KEYS),
            {"timeLimit", "shuffleQuestions", "maxQuestions", "categories", "difficulties",
             "showFeedback", "showTimer", "theme"},
        )

    def test_set_and_get(self) -> None:
        self.cfg.set("timeLimit", 60)
        self.assertEqual(self.cfg.get("time_limit"), 60)

    def test_unknown_key(self) -> None:
        with self.assertRaises(UnknownKey):
            self.cfg.get("invalidKey")
        with self.assertRaises(UnknownKey):
            self.cfg.set("invalidKey", 1)

    def test_set_rejects_wrong_types(self) -> None:
        for key, value in [("timeLimit", "60"), ("timeLimit", 0), ("shuffleQuestions", "yes"),
                           ("maxQuestions", True), ("categories", ["a", "a"]), ("categories", [])]:
            with self.subTest(key=key, value=value):
                with self.assertRaises(InvalidConfigValue):
                    self.cfg.set(key, value)
        self.assertEqual(self.cfg.get("timeLimit"), 30)

    def test_sets_and_tuples_are_stored_as_lists(self) -> None:
        self.cfg.set("categories", {"mathematics", "general"})
        self.assertEqual(self.cfg.get("categories"), ["general", "mathematics"])
        self.cfg.set("difficulties", ("hard", "easy"))
        self.assertEqual(self.cfg.get("difficulties"), ["hard", "easy"])
        with self.assertRaises(InvalidConfigValue):
            self.cfg.set("difficulties", ("easy", "easy"))
        with self.assertRaises(InvalidConfigValue):
            self.cfg.set("categories", {"general", 3})

    def test_get_returns_copies(self) -> None:
        cats = self.cfg.get("categories")
        cats.append("sneaky")
        self.assertEqual(self.cfg.get("categories"), ["programming", "mathematics"])

    def test_load_merges_and_ignores_unknown(self) -> None:
        path = self.tmp / "cfg.json"
        path.write_text(json.dumps({"timeLimit": 45, "bogus": 1, "maxQuestions": -3}), encoding="utf-8")
        with self.assertLogs("quizterm.config.config", level="WARNING"):
            self.assertTrue(self.cfg.load_from_file(path))
        self.assertEqual(self.cfg.get("timeLimit"), 45)
        self.assertEqual(self.cfg.get("maxQuestions"), 5)
        self.assertNotIn("bogus", self.cfg.as_dict())

    def test_load_failure_keeps_defaults(self) -> None:
        path = self.tmp / "broken.json"
        path.write_text("{oops", encoding="utf-8")
        with self.assertLogs("quizterm.config.config", level="ERROR"):
            self.assertFalse(self.cfg.load_from_file(path))
        with self.assertLogs("quizterm.config.config", level="ERROR"):
            self.assertFalse(self.cfg.load_from_file(self.tmp / "missing.json"))
        self.assertEqual(self.cfg.as_dict(), Configuration().as_dict())

    def test_constructor_loads_yaml(self) -> None:
        path = self.tmp / "cfg.yml"
        path.write_text("showTimer: false\ndifficulties: [easy]\n", encoding="utf-8")
        cfg = Configuration(path)
        self.assertIs(cfg.get("showTimer"), False)
        self.assertEqual(cfg.get("difficulties"), ["easy"])

    def test_save_round_trip(self) -> None:
        self.cfg.set("timeLimit", 12)
        self.cfg.set("categories", ["general"])
        self.cfg.set("showFeedback", False)
        for name in ("cfg.json", "cfg.yaml"):
            with self.subTest(name=name):
                path = self.tmp / name
                self.assertTrue(self.cfg.save_to_file(path))
                reloaded = Configuration(path)
                self.assertEqual(reloaded.as_dict(), self.cfg.as_dict())

    def test_save_failure_returns_false(self) -> None:
        with self.assertLogs("quizterm.config.config", level="ERROR"):
            self.assertFalse(self.cfg.save_to_file(self.tmp / "no" / "such" / "dir" / "cfg.json"))


if __name__ == "__main__":
    unittest.main()
