"""quizterm: interactive terminal quiz runner.

Loads a question bank grouped by category and difficulty, selects a subset
per the runtime configuration and runs a timed, scored quiz session.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
