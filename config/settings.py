"""
Unified settings module
- Config file: config/app_config.json (tunable parameters)
- Local override: config/app_config.local.json (private local values, e.g. secret_key)
- Environment variables take precedence for sensitive items
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Any
from dotenv import load_dotenv

load_dotenv()

# config/app_config.json + config/app_config.local.json (local override)
_CONFIG_PATH = Path(__file__).parent / "app_config.json"
_LOCAL_CONFIG_PATH = Path(__file__).parent / "app_config.local.json"

DEFAULT_SECRET_KEY = "change-me-in-local"


def _load_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


_RAW_CONFIG: Dict[str, Any] = _load_json(_CONFIG_PATH)
if _LOCAL_CONFIG_PATH.exists():
    _RAW_CONFIG = _deep_merge(_RAW_CONFIG, _load_json(_LOCAL_CONFIG_PATH))


@dataclass
class ApiSettings:
    """HTTP service settings"""
    host: str = os.getenv("API_HOST", "127.0.0.1")
    port: int = int(os.getenv("API_PORT", "8080"))


@dataclass
class AuthSettings:
    """Credential lifetimes, signing key and first admin account (secrets go in .local.json)"""
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: float = 24.0
    refresh_token_expire_days: float = 7.0
    bcrypt_rounds: int = 12
    # one live renewal credential per account; a new login revokes the previous one
    single_session: bool = True
    admin_username: str = "admin"
    admin_default_password: str = "Admin123!"


@dataclass
class DatabaseSettings:
    url: str = "sqlite:///data/sessiongate.db"


@dataclass
class PathSettings:
    base: Path = field(default_factory=lambda: Path(__file__).parent.parent)

    @property
    def data(self) -> Path:
        return self.base / "data"

    @property
    def logs(self) -> Path:
        return self.base / "logs"

    def ensure_dirs(self):
        for p in [self.data, self.logs]:
            p.mkdir(parents=True, exist_ok=True)


def _api_from_config() -> Dict[str, Any]:
    return (_RAW_CONFIG.get("api") or {})


def _auth_from_config() -> Dict[str, Any]:
    return (_RAW_CONFIG.get("auth") or {})


def _database_from_config() -> Dict[str, Any]:
    return (_RAW_CONFIG.get("database") or {})


def _logging_from_config() -> Dict[str, Any]:
    return (_RAW_CONFIG.get("logging") or {})


class Settings:
    def __init__(self):
        self.env = os.getenv("SESSIONGATE_ENV", "dev")
        a = _api_from_config()
        self.api = ApiSettings(
            host=str(a.get("host", os.getenv("API_HOST", "127.0.0.1"))),
            port=int(a.get("port", os.getenv("API_PORT", "8080"))),
        )
        au = _auth_from_config()
        self.auth = AuthSettings(
            secret_key=os.getenv("SESSIONGATE_SECRET_KEY") or str(au.get("secret_key", DEFAULT_SECRET_KEY)),
            algorithm=str(au.get("algorithm", "HS256")),
            access_token_expire_minutes=float(au.get("access_token_expire_minutes", 24)),
            refresh_token_expire_days=float(au.get("refresh_token_expire_days", 7)),
            bcrypt_rounds=int(au.get("bcrypt_rounds", 12)),
            single_session=bool(au.get("single_session", True)),
            admin_username=str(au.get("admin_username", "admin")),
            admin_default_password=str(au.get("admin_default_password", "Admin123!")),
        )
        db = _database_from_config()
        self.database = DatabaseSettings(
            url=os.getenv("SESSIONGATE_DATABASE_URL") or str(db.get("url", "sqlite:///data/sessiongate.db")),
        )
        self.logging: Dict[str, Any] = _logging_from_config()
        self.path = PathSettings()

    @property
    def uses_default_secret(self) -> bool:
        return self.auth.secret_key == DEFAULT_SECRET_KEY


settings = Settings()
