from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str = os.getenv("GRADEPOINT_LOG_LEVEL", "INFO").upper()
    display_precision: int = _int_env("GRADEPOINT_DISPLAY_PRECISION", 2)


settings = Settings()
