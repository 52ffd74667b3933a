import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = "satquiz"
    DEBUG: bool = _env_flag("SATQUIZ_DEBUG", False)
    LOG_DIR: str = "log"
    LOG_FILE: str = "satquiz.log"
    LOG_TO_FILE: bool = _env_flag("SATQUIZ_LOG_TO_FILE", True)
    QUESTIONS_SOURCE: str = os.getenv(
        "SATQUIZ_QUESTIONS_SOURCE",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "questions.json"),
    )
    QUIZ_LENGTH: int = 10
    SESSION_BACKEND: str = os.getenv("SATQUIZ_SESSION_BACKEND", "redis")
    REDIS_URL: str = os.getenv("SATQUIZ_REDIS_URL", "redis://localhost:6379/0")
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120


settings = Settings()
