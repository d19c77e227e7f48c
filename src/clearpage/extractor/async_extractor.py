"""
asyncio adapter around the synchronous engine.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor
from typing import Optional

import structlog

from ..config.config import EngineConfig
from .engine import ReadabilityEngine
from .models import ExtractedArticle
from .protocols import Extractor

logger = structlog.get_logger(__name__)


class AsyncArticleExtractor(Extractor):
    """Runs extractions in an executor so they never block the event loop.

    Each call is bounded by ``config.extraction_timeout``; on expiry the
    awaiting task gets ``asyncio.TimeoutError`` and the worker thread finishes
    on its own, since the engine has no suspension points to cancel at.
    """

    name = "clearpage"

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.engine = ReadabilityEngine(self.config)
        self.executor = executor

    async def extract(self, html: str, *, url: str) -> ExtractedArticle:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self.executor, self.engine.extract, html, url),
                timeout=self.config.extraction_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Extraction timed out", url=url, timeout=self.config.extraction_timeout)
            raise
