from __future__ import annotations

"""Line-based terminal front end: main menu, settings and the question loop."""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO, Union

from ..errors import InvalidConfigValue, QuizError
from ..results.schema import Result
from .quiz_manager import QuizManager
from .timed_input import Countdown, LineReader, ask_with_deadline

logger = logging.getLogger(__name__)

RULE = "=" * 48
THIN_RULE = "-" * 48
CLEAR = "\x1b[2J\x1b[H"
DEFAULT_CONFIG_FILE = "quizterm.json"


class TerminalUI:
    def __init__(
        self,
        manager: QuizManager,
        *,
        reader: Optional[LineReader] = None,
        out: Optional[TextIO] = None,
        pause: float = 1.5,
        clear_screen: bool = True,
        config_path: Union[str, Path, None] = None,
    ) -> None:
        self.manager = manager
        self.config = manager.config
        self.reader = reader or LineReader()
        self.out = out if out is not None else sys.stdout
        self.pause = pause
        self.clear_screen = clear_screen
        self.config_path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILE)

    # --- output helpers ---

    def _print(self, msg: str = "") -> None:
        self.out.write(msg + "\n")
        self.out.flush()

    def _style(self, role: str, text: str) -> str:
        theme = self.config.get("theme")
        return f"{theme.get(role, '')}{text}{theme.get('normal', '')}"

    def _prompt(self, text: str, timeout: Optional[float] = None) -> str:
        if self.reader.abandoned:
            # typed after a timed-out question
            self.reader.discard_pending()
        self.out.write(text)
        self.out.flush()
        return self.reader.read(timeout=timeout)

    def _wait(self) -> None:
        if self.pause > 0:
            time.sleep(self.pause)

    def _clear(self) -> None:
        if self.clear_screen:
            self.out.write(CLEAR)

    def show_banner(self, title: str = "QUIZ TERMINAL") -> None:
        self._clear()
        self._print(self._style("highlight", RULE))
        self._print(self._style("highlight", title.center(len(RULE))))
        self._print(self._style("highlight", RULE))

    # --- menus ---

    def run(self) -> int:
        """Main loop; returns the process exit code."""
        try:
            while True:
                self.show_banner()
                self._print("Welcome to Quiz Terminal!\n")
                self._print("Choose an option:")
                self._print("1. Start quiz")
                self._print("2. Settings")
                self._print("3. Exit")
                choice = self._prompt("\nYour choice: ").strip()
                if choice == "1":
                    self.start_quiz()
                elif choice == "2":
                    self.show_settings()
                elif choice == "3":
                    break
                else:
                    self._print("\nInvalid choice. Please try again.")
                    self._wait()
        except EOFError:
            self._print()
        self._print("Thanks for using Quiz Terminal. Goodbye!")
        return 0

    def show_settings(self) -> None:
        actions: Dict[str, Callable[[], None]] = {
            "1": lambda: self._set_positive_int("time_limit", "Time limit per question (seconds)"),
            "2": lambda: self._toggle("shuffle_questions", "Shuffle questions"),
            "3": lambda: self._set_positive_int("max_questions", "Number of questions"),
            "4": lambda: self._toggle("show_timer", "Show timer"),
            "5": lambda: self._toggle("show_feedback", "Show feedback"),
            "6": lambda: self._set_choices("categories", self.manager.bank.categories()),
            "7": lambda: self._set_choices("difficulties", self.manager.bank.difficulties()),
            "8": self._save_settings,
        }
        while True:
            self.show_banner("SETTINGS")
            self._print(f"1. Time limit per question: {self.config.get('time_limit')} seconds")
            self._print(f"2. Shuffle questions: {self._yes_no(self.config.get('shuffle_questions'))}")
            self._print(f"3. Number of questions: {self.config.get('max_questions')}")
            self._print(f"4. Show timer: {self._yes_no(self.config.get('show_timer'))}")
            self._print(f"5. Show feedback: {self._yes_no(self.config.get('show_feedback'))}")
            self._print(f"6. Categories: {', '.join(self.config.get('categories'))}")
            self._print(f"7. Difficulties: {', '.join(self.config.get('difficulties'))}")
            self._print(f"8. Save settings to {self.config_path}")
            self._print("9. Back to main menu")
            choice = self._prompt("\nYour choice: ").strip()
            if choice == "9":
                return
            action = actions.get(choice)
            if action is None:
                self._print("\nInvalid choice. Please try again.")
            else:
                action()
            self._wait()

    @staticmethod
    def _yes_no(flag: bool) -> str:
        return "Yes" if flag else "No"

    def _set_positive_int(self, key: str, label: str) -> None:
        current = self.config.get(key)
        raw = self._prompt(f"\nNew value for {label} (current: {current}): ").strip()
        try:
            value = int(raw)
        except ValueError:
            value = 0
        if value <= 0:
            self._print("\nInvalid value. It must be a positive number.")
            return
        self.config.set(key, value)
        self._print(f"\n{label} set to {value}")

    def _toggle(self, key: str, label: str) -> None:
        value = not self.config.get(key)
        self.config.set(key, value)
        self._print(f"\n{label} set to {self._yes_no(value)}")

    def _set_choices(self, key: str, available: List[str]) -> None:
        self._print(f"\nAvailable {key}: {', '.join(available)}")
        raw = self._prompt(f"Enter {key} separated by commas (current: {', '.join(self.config.get(key))}): ")
        chosen = [c.strip() for c in raw.split(",") if c.strip()]
        unknown = [c for c in chosen if c not in available]
        if not chosen or unknown:
            self._print(f"\nInvalid selection: {', '.join(unknown) or 'nothing selected'}")
            return
        try:
            self.config.set(key, list(dict.fromkeys(chosen)))
        except InvalidConfigValue as e:
            self._print(f"\n{e}")
            return
        self._print(f"\n{key} set to {', '.join(self.config.get(key))}")

    def _save_settings(self) -> None:
        if self.config.save_to_file(self.config_path):
            self._print(f"\nSettings saved to {self.config_path}")
        else:
            self._print(self._style("incorrect", f"\nCould not save settings to {self.config_path}"))

    # --- quiz loop ---

    def start_quiz(self) -> Optional[Result]:
        self._print("Starting quiz...")
        try:
            self.manager.start_quiz()
        except QuizError as e:
            logger.debug("Quiz could not start: %s", e)
            self._print(self._style("incorrect", f"Cannot start the quiz: {e}"))
            self._print("Returning to the main menu...")
            self._wait()
            return None

        while True:
            self.show_question()
            self._wait()
            if not self.manager.advance():
                break
        result = self.manager.finish()
        self.show_results(result)
        return result

    def _on_tick(self, seconds_left: int) -> None:
        # rewrite the timer line above the prompt, keeping the cursor in place
        line = self._style("timer", f"Time left: {seconds_left} seconds")
        self.out.write(f"\x1b7\x1b[1A\r{line}\x1b[K\x1b8")
        self.out.flush()

    def show_question(self) -> bool:
        m = self.manager
        question = m.get_current_question()
        self._clear()
        self._print(self._style("highlight", RULE))
        self._print(self._style(
            "highlight",
            f" Question {m.current_index + 1} of {m.question_count} - {question.category} ({question.difficulty})",
        ))
        self._print(self._style("highlight", RULE) + "\n")
        self._print(question.text + "\n")
        for line in question.lettered_options():
            self._print(line)

        time_limit = self.config.get("time_limit")
        countdown = None
        if self.config.get("show_timer"):
            self._print("\n" + self._style("timer", f"Time left: {time_limit} seconds"))
            countdown = Countdown(time_limit, self._on_tick)

        if question.has_options:
            last = chr(ord("A") + len(question.options or []) - 1)
            self.out.write(f"\nYour answer (A-{last}): ")
        else:
            self.out.write("\nYour answer: ")
        self.out.flush()

        answer = ask_with_deadline(self.reader, time_limit, countdown)
        if answer.timed_out:
            m.record_timeout()
            self._print("\n\n" + self._style("incorrect", "Time is up!"))
            if self.config.get("show_feedback"):
                self._print(f"The correct answer was: {question.correct_answer}")
            return False

        correct = m.check_answer(answer.text)
        if self.config.get("show_feedback"):
            if correct:
                self._print("\n" + self._style("correct", f"Correct! +{question.points} points"))
            else:
                self._print("\n" + self._style("incorrect", f"Wrong! The correct answer is {question.correct_answer}"))
            if question.explanation:
                self._print(f"Explanation: {question.explanation}")
        return correct

    def show_results(self, result: Result) -> None:
        self._clear()
        self._print(self._style("highlight", RULE))
        self._print(self._style("highlight", "QUIZ RESULTS".center(len(RULE))))
        self._print(self._style("highlight", RULE))
        self._print(f"User ID: {result.user_id}")
        self._print(f"Score: {result.score} of {result.total_points} ({result.percentage:.2f}%)")
        self._print(f"Questions: {result.question_count}")
        self._print(f"Correct answers: {result.correct_count}")
        self._print(f"Duration: {result.duration.display}")
        self._print(f"Feedback: {result.feedback}")
        self._print(self._style("highlight", RULE))

        self._print("\nAnswer details:")
        for a in result.answers:
            status = self._style("correct", "Correct") if a.is_correct else self._style("incorrect", "Wrong")
            given = a.user_answer if not a.timed_out else "(time expired)"
            self._print(f"Question: {a.question}")
            self._print(f"Your answer: {given} | Correct answer: {a.correct_answer}")
            self._print(f"Status: {status}")
            self._print(self._style("highlight", THIN_RULE))

        stats = self.manager.get_user_stats()
        if stats.total_quizzes > 1:
            self._print(
                f"\nQuizzes taken: {stats.total_quizzes} | Average score: {stats.average_score:.2f}%"
                + (f" | Best category: {stats.best_category}" if stats.best_category else "")
            )

        self._prompt("\nPress Enter to return to the main menu...")
