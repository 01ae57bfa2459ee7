"""Snowflake identifier codec. Pure value type, no I/O.

Layout (64 bits, high to low):

    | timestamp (ms since epoch)                 | worker | process | increment    |
    | 63                                      22 | 21  17 | 16   12 | 11         0 |

The epoch is carried next to the packed value, never inside it. A raw
integer received over the wire needs its epoch re-attached to recover the
absolute wall-clock time; DEFAULT_EPOCH_MS is used when none is given.

Packing never validates: each field is masked to its width, so oversized
inputs are silently truncated. Use Snowflake.checked() to reject them.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from src.sf_common.datetime_utils import MAX_DATETIME_MS, from_ms, now_ms, to_ms
from src.sf_common.errors import FieldOutOfRangeError, MalformedIntegerError

DEFAULT_EPOCH_MS = 1_420_070_400_000  # 2015-01-01T00:00:00Z

TIMESTAMP_BITS = 42
WORKER_BITS = 5
PROCESS_BITS = 5
INCREMENT_BITS = 12

PROCESS_SHIFT = INCREMENT_BITS
WORKER_SHIFT = PROCESS_SHIFT + PROCESS_BITS
TIMESTAMP_SHIFT = WORKER_SHIFT + WORKER_BITS

MAX_WORKER = (1 << WORKER_BITS) - 1
MAX_PROCESS = (1 << PROCESS_BITS) - 1
MAX_INCREMENT = (1 << INCREMENT_BITS) - 1
MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1
# Largest offset whose packed value is still positive when read as int64.
MAX_SIGNED_TIMESTAMP = (1 << (TIMESTAMP_BITS - 1)) - 1

MAX_VALUE = (1 << 64) - 1
# Largest epoch for which every timestamp offset still maps to a datetime.
MAX_EPOCH_MS = MAX_DATETIME_MS - MAX_TIMESTAMP
_SIGN_BIT = 1 << 63

_DECIMAL_RE = re.compile(r"[0-9]+", re.ASCII)
_MAX_DIGITS = len(str(MAX_VALUE))


def pack(worker: int, process: int, increment: int, timestamp_offset_ms: int) -> int:
    """Pack the four fields into one unsigned 64-bit integer.

    Fields wider than their slot are truncated by mask. A negative offset
    lands as its two's-complement low 42 bits.
    """
    return (
        ((timestamp_offset_ms & MAX_TIMESTAMP) << TIMESTAMP_SHIFT)
        | ((worker & MAX_WORKER) << WORKER_SHIFT)
        | ((process & MAX_PROCESS) << PROCESS_SHIFT)
        | (increment & MAX_INCREMENT)
    )


@dataclass(frozen=True)
class Snowflake:
    """Immutable 64-bit identifier plus the epoch it was minted against.

    The value is masked to 64 bits on construction, so negative input is read
    as an int64 bit pattern.

    Equality covers both value and epoch, ordering only the packed value. Two
    ids with the same value and different epochs are neither < nor > each
    other yet compare unequal, so sorted() and bisect only give a total order
    over ids that share one epoch.
    """

    value: int
    epoch: int = DEFAULT_EPOCH_MS

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.value & MAX_VALUE)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_parts(
        cls,
        worker: int,
        process: int,
        increment: int,
        timestamp_ms: int,
        epoch: int = DEFAULT_EPOCH_MS,
    ) -> "Snowflake":
        """Build from an absolute wall-clock time in Unix milliseconds."""
        return cls(pack(worker, process, increment, timestamp_ms - epoch), epoch)

    @classmethod
    def from_datetime(
        cls,
        worker: int,
        process: int,
        increment: int,
        moment: datetime,
        epoch: int = DEFAULT_EPOCH_MS,
    ) -> "Snowflake":
        return cls.from_parts(worker, process, increment, to_ms(moment), epoch)

    @classmethod
    def now(
        cls,
        worker: int,
        process: int,
        increment: int,
        epoch: int = DEFAULT_EPOCH_MS,
        clock: Callable[[], int] = now_ms,
    ) -> "Snowflake":
        return cls.from_parts(worker, process, increment, clock(), epoch)

    @classmethod
    def checked(
        cls,
        worker: int,
        process: int,
        increment: int,
        timestamp_ms: int,
        epoch: int = DEFAULT_EPOCH_MS,
    ) -> "Snowflake":
        """Like from_parts, but raise FieldOutOfRangeError instead of truncating."""
        offset = timestamp_ms - epoch
        for field, value, maximum in (
            ("worker", worker, MAX_WORKER),
            ("process", process, MAX_PROCESS),
            ("increment", increment, MAX_INCREMENT),
            ("timestamp", offset, MAX_TIMESTAMP),
        ):
            if not (0 <= value <= maximum):
                raise FieldOutOfRangeError(field, value, maximum)
        return cls(pack(worker, process, increment, offset), epoch)

    @classmethod
    def from_value(cls, raw: int, epoch: int = DEFAULT_EPOCH_MS) -> "Snowflake":
        """Wrap any integer as an identifier. Signed input is reinterpreted bitwise."""
        return cls(raw, epoch)

    @classmethod
    def from_i64(cls, raw: int, epoch: int = DEFAULT_EPOCH_MS) -> "Snowflake":
        return cls.from_value(raw, epoch)

    # ------------------------------------------------------------------
    # Field accessors
    # ------------------------------------------------------------------

    @property
    def worker(self) -> int:
        return (self.value >> WORKER_SHIFT) & MAX_WORKER

    @property
    def process(self) -> int:
        return (self.value >> PROCESS_SHIFT) & MAX_PROCESS

    @property
    def increment(self) -> int:
        return self.value & MAX_INCREMENT

    @property
    def timestamp(self) -> int:
        """Milliseconds elapsed since the epoch."""
        return (self.value >> TIMESTAMP_SHIFT) & MAX_TIMESTAMP

    @property
    def absolute_timestamp(self) -> int:
        """Unix milliseconds at which the identifier was minted."""
        return self.timestamp + self.epoch

    @property
    def created_at(self) -> datetime | None:
        """UTC datetime of absolute_timestamp, or None when outside years 1-9999."""
        try:
            return from_ms(self.absolute_timestamp)
        except OverflowError:
            return None

    def as_u64(self) -> int:
        return self.value

    def as_i64(self) -> int:
        return self.value - (1 << 64) if self.value & _SIGN_BIT else self.value

    # ------------------------------------------------------------------
    # Copy with one field changed
    # ------------------------------------------------------------------

    def with_worker(self, worker: int) -> "Snowflake":
        return replace(self, value=pack(worker, self.process, self.increment, self.timestamp))

    def with_process(self, process: int) -> "Snowflake":
        return replace(self, value=pack(self.worker, process, self.increment, self.timestamp))

    def with_increment(self, increment: int) -> "Snowflake":
        return replace(self, value=pack(self.worker, self.process, increment, self.timestamp))

    def with_timestamp(self, timestamp_offset_ms: int) -> "Snowflake":
        return replace(
            self, value=pack(self.worker, self.process, self.increment, timestamp_offset_ms)
        )

    def with_epoch(self, epoch: int) -> "Snowflake":
        """Re-attach a different epoch; the packed bits are unchanged."""
        return replace(self, epoch=epoch)

    # ------------------------------------------------------------------
    # Conversions and ordering
    # ------------------------------------------------------------------

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return (
            f"Snowflake({self.value}, worker={self.worker}, process={self.process}, "
            f"increment={self.increment}, timestamp={self.timestamp}, epoch={self.epoch})"
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Snowflake):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Snowflake):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Snowflake):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Snowflake):
            return NotImplemented
        return self.value >= other.value


def parse(text: str, epoch: int = DEFAULT_EPOCH_MS) -> Snowflake:
    """Parse the canonical decimal form. Never wraps out-of-range input."""
    if not _DECIMAL_RE.fullmatch(text) or len(text.lstrip("0")) > _MAX_DIGITS:
        raise MalformedIntegerError(text)
    value = int(text)
    if value > MAX_VALUE:
        raise MalformedIntegerError(text)
    return Snowflake(value, epoch)
