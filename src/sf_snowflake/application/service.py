"""SnowflakeApplicationService — thin composition layer over the generator.

One generator per process: the service is built once at import of the router
and every request runs on the event-loop thread, so generate() calls never
interleave.
"""

import logging

from config.settings import settings
from src.sf_snowflake.application.schemas import DecodedSnowflake, GeneratedSnowflakes
from src.sf_snowflake.domain.generator import SnowflakeGenerator
from src.sf_snowflake.domain.snowflake import parse

logger = logging.getLogger(__name__)


class SnowflakeApplicationService:
    def __init__(self, generator: SnowflakeGenerator | None = None) -> None:
        self._generator = generator or SnowflakeGenerator(
            settings.WORKER_ID, settings.PROCESS_ID, settings.EPOCH_MS
        )

    @property
    def generator(self) -> SnowflakeGenerator:
        return self._generator

    def generate(self, count: int = 1) -> GeneratedSnowflakes:
        ids = [self._generator.generate() for _ in range(count)]
        logger.debug("Generated %d snowflakes, last=%s", count, ids[-1] if ids else None)
        return GeneratedSnowflakes(
            ids=ids,
            worker=self._generator.worker,
            process=self._generator.process,
            epoch=self._generator.epoch,
        )

    def decode(self, raw: str, epoch: int | None = None) -> DecodedSnowflake:
        """Parse a decimal snowflake; raises MalformedIntegerError on bad input."""
        snowflake = parse(raw, self._generator.epoch if epoch is None else epoch)
        return DecodedSnowflake.from_domain(snowflake)
