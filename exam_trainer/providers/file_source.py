from __future__ import annotations

import asyncio
import json
from pathlib import Path

from exam_trainer.providers.base import DatasetProvider


class FileDatasetProvider(DatasetProvider):
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    async def fetch(self, name: str) -> object:
        path = self.data_dir / f"{name}.json"
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return json.loads(text)

    def name(self) -> str:
        return f"file/{self.data_dir}"
