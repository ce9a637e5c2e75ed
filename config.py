import tomllib
import shutil
import re
import secrets
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".cortex"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_QUESTION_COUNT = 10
DEFAULT_MAX_DISTRACTORS = 3
DEFAULT_SESSION_DAYS = 7


def load_config() -> Dict[str, Any]:
    """Load config from ~/.cortex/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., CORTEX_PORT env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    server_cfg = config.get("server", {})
    config["server"] = {
        "host": os.getenv("CORTEX_HOST", server_cfg.get("host", "127.0.0.1")),
        "port": int(os.getenv("CORTEX_PORT", server_cfg.get("port", 8000))),
    }
    auth_cfg = config.get("auth", {})
    config["auth"] = {
        "secret_key": os.getenv("CORTEX_SECRET_KEY", auth_cfg.get("secret_key", "")),
        "session_days": int(os.getenv(
            "CORTEX_SESSION_DAYS", auth_cfg.get("session_days", DEFAULT_SESSION_DAYS)
        )),
        "cookie_secure": os.getenv(
            "CORTEX_COOKIE_SECURE", str(auth_cfg.get("cookie_secure", False))
        ).lower() == "true",
    }
    game_cfg = config.get("game", {})
    config["game"] = {
        "default_question_count": int(game_cfg.get("default_question_count", DEFAULT_QUESTION_COUNT)),
        "max_distractors": int(game_cfg.get("max_distractors", DEFAULT_MAX_DISTRACTORS)),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("CORTEX_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }
    return config


def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('game', 'max_distractors')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value


def set_secret_key(secret_key: str) -> None:
    """Persist the session signing secret into config.toml."""
    load_config()
    text = CONFIG_PATH.read_text()
    if "[auth]" not in text:
        text = text.rstrip() + f'\n\n[auth]\nsecret_key = "{secret_key}"\n'
        CONFIG_PATH.write_text(text)
        return

    def update_section(match: re.Match) -> str:
        section = match.group(1)
        rest = match.group(2)
        if re.search(r"^secret_key\s*=", section, flags=re.MULTILINE):
            section = re.sub(
                r"^secret_key\s*=.*$",
                f'secret_key = "{secret_key}"',
                section,
                flags=re.MULTILINE,
            )
        else:
            lines = section.rstrip().splitlines()
            insert_at = 1 if lines else 0
            lines.insert(insert_at, f'secret_key = "{secret_key}"')
            section = "\n".join(lines) + "\n"
        return section + rest

    text = re.sub(r"(?ms)(^\[auth\].*?)(^\[|\Z)", update_section, text, count=1)
    CONFIG_PATH.write_text(text)


def get_secret_key() -> str:
    """Return the configured secret, generating and persisting one on first use."""
    secret_key = load_config()["auth"]["secret_key"]
    if secret_key:
        return secret_key
    secret_key = secrets.token_hex(32)
    set_secret_key(secret_key)
    return secret_key
