import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".vocabcoach"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_REVISION = {
    "pool_threshold": 50,
    "session_cap": 50,
    "slow_attempt_ms": 15000,
}
DEFAULT_QUIZ = {
    "option_count": 4,
    "min_bookmark_quiz_words": 5,
}
DEFAULT_LOGGING = {
    "level": "INFO",
    "dir": str(CONFIG_DIR / "logs"),
    "file": "vocabcoach.log",
}

def load_config() -> Dict[str, Any]:
    """Load config from ~/.vocabcoach/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    revision_cfg = config.get("revision", {})
    config["revision"] = {
        "pool_threshold": int(os.getenv(
            "VOCABCOACH_POOL_THRESHOLD",
            revision_cfg.get("pool_threshold", DEFAULT_REVISION["pool_threshold"])
        )),
        "session_cap": int(os.getenv(
            "VOCABCOACH_SESSION_CAP",
            revision_cfg.get("session_cap", DEFAULT_REVISION["session_cap"])
        )),
        "slow_attempt_ms": int(os.getenv(
            "VOCABCOACH_SLOW_ATTEMPT_MS",
            revision_cfg.get("slow_attempt_ms", DEFAULT_REVISION["slow_attempt_ms"])
        )),
    }
    quiz_cfg = config.get("quiz", {})
    config["quiz"] = {
        "option_count": int(os.getenv(
            "VOCABCOACH_OPTION_COUNT",
            quiz_cfg.get("option_count", DEFAULT_QUIZ["option_count"])
        )),
        "min_bookmark_quiz_words": int(
            quiz_cfg.get("min_bookmark_quiz_words", DEFAULT_QUIZ["min_bookmark_quiz_words"])
        ),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("VOCABCOACH_LOG_LEVEL", logging_cfg.get("level", DEFAULT_LOGGING["level"])).upper(),
        "dir": logging_cfg.get("dir", DEFAULT_LOGGING["dir"]),
        "file": logging_cfg.get("file", DEFAULT_LOGGING["file"]),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('revision', 'session_cap')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
