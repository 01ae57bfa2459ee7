"""Tests for sf_snowflake.domain.generator."""

import itertools
import logging

import pytest

from src.sf_common.datetime_utils import now_ms
from src.sf_snowflake.domain.generator import SnowflakeGenerator
from src.sf_snowflake.domain.snowflake import DEFAULT_EPOCH_MS, Snowflake

WORKER = 8
PROCESS = 26
GENERATED_COUNT = 500_000


class FixedClock:
    """Wall clock that only moves when told to."""

    def __init__(self, ms: int) -> None:
        self.ms = ms

    def __call__(self) -> int:
        return self.ms


@pytest.fixture(scope="module")
def bulk() -> tuple[int, list[Snowflake]]:
    start_ms = now_ms()
    generator = SnowflakeGenerator(WORKER, PROCESS)
    return start_ms, list(itertools.islice(generator, GENERATED_COUNT))


class TestBulkGeneration:
    def test_count(self, bulk) -> None:
        _, snowflakes = bulk
        assert len(snowflakes) == GENERATED_COUNT

    def test_no_duplicates(self, bulk) -> None:
        _, snowflakes = bulk
        assert len({s.value for s in snowflakes}) == GENERATED_COUNT

    def test_fields_preserved(self, bulk) -> None:
        _, snowflakes = bulk
        assert all(s.worker == WORKER and s.process == PROCESS for s in snowflakes)

    def test_timestamp_floor(self, bulk) -> None:
        start_ms, snowflakes = bulk
        assert all(s.absolute_timestamp >= start_ms for s in snowflakes)


class TestGenerate:
    def test_defaults(self) -> None:
        gen = SnowflakeGenerator()
        assert (gen.worker, gen.process, gen.epoch, gen.increment) == (
            0,
            0,
            DEFAULT_EPOCH_MS,
            0,
        )

    def test_returns_pre_advance_increment(self) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS)
        first = gen.generate()
        assert first.increment == 0
        assert gen.increment == 1

    def test_uses_clock_and_epoch(self) -> None:
        epoch = 1_600_000_000_000
        gen = SnowflakeGenerator(WORKER, PROCESS, epoch, clock=FixedClock(epoch + 1234))
        s = gen.generate()
        assert s.timestamp == 1234
        assert s.epoch == epoch
        assert s.absolute_timestamp == epoch + 1234

    def test_wraparound(self) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS, clock=FixedClock(now_ms()))
        increments = [gen.generate().increment for _ in range(4097)]
        assert increments == list(range(4096)) + [0]
        assert gen.increment == 1

    def test_wraparound_collides_within_same_ms(self) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS, clock=FixedClock(now_ms()))
        values = [gen.generate().value for _ in range(4097)]
        assert len(set(values)) == 4096
        assert values[0] == values[4096]

    def test_wraparound_logged(self, caplog) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS, clock=FixedClock(now_ms()))
        with caplog.at_level(logging.DEBUG, logger="src.sf_snowflake.domain.generator"):
            for _ in range(4096):
                gen.generate()
        assert any("wrapped" in r.getMessage() for r in caplog.records)

    def test_out_of_range_ids_truncated_not_rejected(self) -> None:
        gen = SnowflakeGenerator(33, 34)
        s = gen.generate()
        assert (s.worker, s.process) == (1, 2)


class TestOrdering:
    def test_increasing_within_one_ms(self) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS, clock=FixedClock(now_ms()))
        values = [gen.generate().value for _ in range(4096)]
        assert values == sorted(values)

    def test_timestamp_dominates_across_ms(self) -> None:
        clock = FixedClock(now_ms())
        gen = SnowflakeGenerator(WORKER, PROCESS, clock=clock)
        for _ in range(100):
            gen.generate()
        before = gen.generate()
        clock.ms += 1
        # Force the increment below the previous one; the newer ms still sorts later
        for _ in range(4096 - gen.increment):
            gen.generate()
        clock.ms += 1
        after = gen.generate()
        assert after.increment < before.increment
        assert after > before

    def test_non_decreasing_with_real_clock(self) -> None:
        gen = SnowflakeGenerator(WORKER, PROCESS)
        values = [s.value for s in itertools.islice(gen, 2000)]
        assert values == sorted(values)


class TestIteratorProtocol:
    def test_iter_returns_self(self) -> None:
        gen = SnowflakeGenerator()
        assert iter(gen) is gen

    def test_next_advances(self) -> None:
        gen = SnowflakeGenerator(clock=FixedClock(DEFAULT_EPOCH_MS))
        assert next(gen).increment == 0
        assert next(gen).increment == 1
        assert gen.generate().increment == 2

    def test_not_restartable(self) -> None:
        gen = SnowflakeGenerator(clock=FixedClock(DEFAULT_EPOCH_MS))
        first = list(itertools.islice(gen, 3))
        second = list(itertools.islice(gen, 3))
        assert [s.increment for s in first] == [0, 1, 2]
        assert [s.increment for s in second] == [3, 4, 5]
