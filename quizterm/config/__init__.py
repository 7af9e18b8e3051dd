from .config import CONFIG_KEYS, DEFAULT_THEME, Configuration, QuizSettings

__all__ = ["CONFIG_KEYS", "DEFAULT_THEME", "Configuration", "QuizSettings"]
