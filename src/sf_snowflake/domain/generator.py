"""Sequential snowflake generator for one (worker, process) pair.

Not thread-safe: the increment is read and advanced without a lock, so a
generator must stay with a single owner (thread, task or actor). Callers that
share one across threads serialize access themselves.
"""

import logging
from collections.abc import Callable, Iterator

from src.sf_common.datetime_utils import now_ms
from src.sf_snowflake.domain.snowflake import DEFAULT_EPOCH_MS, MAX_INCREMENT, Snowflake

logger = logging.getLogger(__name__)


class SnowflakeGenerator(Iterator[Snowflake]):
    """Infinite, non-restartable stream of snowflakes.

    The increment wraps from 4095 back to 0 with no carry, so more than 4096
    ids in the same millisecond can collide.
    """

    def __init__(
        self,
        worker: int = 0,
        process: int = 0,
        epoch: int = DEFAULT_EPOCH_MS,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._worker = worker
        self._process = process
        self._epoch = epoch
        self._clock = clock or now_ms
        self._increment = 0
        logger.debug(
            "Snowflake generator ready: worker=%d process=%d epoch=%d",
            worker,
            process,
            epoch,
        )

    @property
    def worker(self) -> int:
        return self._worker

    @property
    def process(self) -> int:
        return self._process

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def increment(self) -> int:
        """Increment the next generated id will carry."""
        return self._increment

    def generate(self) -> Snowflake:
        snowflake = Snowflake.from_parts(
            self._worker, self._process, self._increment, self._clock(), self._epoch
        )
        self._increment = (self._increment + 1) & MAX_INCREMENT
        if self._increment == 0:
            logger.debug(
                "Increment wrapped: worker=%d process=%d", self._worker, self._process
            )
        return snowflake

    def __iter__(self) -> "SnowflakeGenerator":
        return self

    def __next__(self) -> Snowflake:
        return self.generate()
