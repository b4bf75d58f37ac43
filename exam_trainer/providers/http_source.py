from __future__ import annotations

import logging
import time

import httpx

from exam_trainer.providers.base import DatasetProvider

log = logging.getLogger("exam_trainer.fetch")


class HttpDatasetProvider(DatasetProvider):
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def fetch(self, name: str) -> object:
        url = f"{self.base_url}/{name}.json"
        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url, headers={"Cache-Control": "no-store"})
            resp.raise_for_status()
            data = resp.json()
        log.info("Fetched %s (%.2fs)", url, time.monotonic() - t0)
        return data

    def name(self) -> str:
        return f"http/{self.base_url}"
