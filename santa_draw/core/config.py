import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str
    log_path: str
    draw_max_attempts: int
    probe_attempts: int
    relaxed_max_attempts: int
    reveal_base_url: str


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite+pysqlite:///santa.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "logs/santa_draw.log"),
        draw_max_attempts=_positive_int("DRAW_MAX_ATTEMPTS", 1000),
        probe_attempts=_positive_int("PROBE_ATTEMPTS", 100),
        relaxed_max_attempts=_positive_int("RELAXED_MAX_ATTEMPTS", 1000),
        reveal_base_url=os.getenv("REVEAL_BASE_URL", "http://localhost:3000").rstrip("/"),
    )
