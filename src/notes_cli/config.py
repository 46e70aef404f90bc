from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
import json
import os
from pathlib import Path
from .errors import ConfigError

ENV_PREFIX = "NOTES_"

def _as_int(data: Mapping[str, Any], key: str, default: int) -> int:
    raw = data.get(key, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc

def _as_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)

@dataclass
class NotesConfig:
    name: str = "notes"
    db_path: str = "notes.db"
    default_sentences: int = 2
    log_level: str = "INFO"
    log_path: str = ""
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    auto_summarize: bool = False
    list_limit: int = 100

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "NotesConfig":
        origins = data.get("cors_origins", ["*"])
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(",") if o.strip()]
        return NotesConfig(
            name=data.get("name", "notes"),
            db_path=str(data.get("db_path", "notes.db")),
            default_sentences=_as_int(data, "default_sentences", 2),
            log_level=str(data.get("log_level", "INFO")).upper(),
            log_path=data.get("log_path", "") or "",
            cors_origins=list(origins),
            auto_summarize=_as_bool(data.get("auto_summarize", False)),
            list_limit=_as_int(data, "list_limit", 100),
        )

    @staticmethod
    def load_json_str(s: str) -> "NotesConfig":
        try:
            data = json.loads(s)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid config JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("config JSON must be an object")
        return NotesConfig.from_dict(data)

    @staticmethod
    def load(path: Path) -> "NotesConfig":
        return NotesConfig.load_json_str(Path(path).read_text())

    @staticmethod
    def from_env(base: Optional["NotesConfig"] = None, environ: Optional[Mapping[str, str]] = None) -> "NotesConfig":
        """Start from NOTES_CONFIG (or `base`, or defaults) and apply NOTES_* overrides."""
        env = os.environ if environ is None else environ
        if base is None:
            cfg_file = env.get(ENV_PREFIX + "CONFIG")
            base = NotesConfig.load(Path(cfg_file)) if cfg_file else NotesConfig()
        data = base.to_dict()
        for key in ("db_path", "log_level", "log_path", "default_sentences",
                    "auto_summarize", "cors_origins", "list_limit"):
            value = env.get(ENV_PREFIX + key.upper())
            if value is not None and value != "":
                data[key] = value
        return NotesConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "db_path": self.db_path,
            "default_sentences": self.default_sentences,
            "log_level": self.log_level,
            "log_path": self.log_path,
            "cors_origins": list(self.cors_origins),
            "auto_summarize": self.auto_summarize,
            "list_limit": self.list_limit,
        }

    def dump(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

def write_default_config(path: Path) -> None:
    if path.exists():
        raise FileExistsError(f"{path} already exists")
    path.write_text(NotesConfig().dump())
