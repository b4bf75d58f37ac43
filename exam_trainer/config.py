from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "quiz_seconds": 10 * 60,
    "writing_seconds": 20 * 60,
    "daily_cap_seconds": 30 * 60,
    "recent_capacity": 120,
    "generated_multiplier": 2,
    "dataset_source": "file",
    "dataset_url": "",
    "data_dir": "data",
    "db_path": "progress.db",
    "fetch_timeout": 10.0,
}


@dataclass
class Settings:
    quiz_seconds: int = DEFAULTS["quiz_seconds"]
    writing_seconds: int = DEFAULTS["writing_seconds"]
    daily_cap_seconds: int = DEFAULTS["daily_cap_seconds"]
    recent_capacity: int = DEFAULTS["recent_capacity"]
    generated_multiplier: int = DEFAULTS["generated_multiplier"]
    dataset_source: str = DEFAULTS["dataset_source"]  # file | http
    dataset_url: str = DEFAULTS["dataset_url"]
    data_dir: str = DEFAULTS["data_dir"]
    db_path: str = DEFAULTS["db_path"]
    fetch_timeout: float = DEFAULTS["fetch_timeout"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_full_path(self) -> Path:
        return self.project_root / self.data_dir

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    def to_dict(self) -> dict:
        return {
            "quiz_seconds": self.quiz_seconds,
            "writing_seconds": self.writing_seconds,
            "daily_cap_seconds": self.daily_cap_seconds,
            "recent_capacity": self.recent_capacity,
            "generated_multiplier": self.generated_multiplier,
            "dataset_source": self.dataset_source,
            "dataset_url": self.dataset_url,
            "data_dir": self.data_dir,
            "db_path": self.db_path,
            "fetch_timeout": self.fetch_timeout,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
