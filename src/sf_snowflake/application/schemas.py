"""Pydantic schemas for sf_snowflake interchange and API responses.

Snowflakes travel as decimal strings: JSON consumers commonly parse numbers
as doubles and lose precision above 2^53. Incoming values may be the string
form or a plain integer; either way the default epoch is re-attached, since
the epoch never travels with the wire value.
"""

from typing import Annotated, Any

from pydantic import BaseModel, PlainSerializer, PlainValidator, WithJsonSchema

from src.sf_common.errors import MalformedIntegerError
from src.sf_snowflake.domain.snowflake import MAX_VALUE, Snowflake, parse

# ---------------------------------------------------------------------------
# Snowflake as a string field
# ---------------------------------------------------------------------------


def _coerce_snowflake(raw: Any) -> Snowflake:
    if isinstance(raw, Snowflake):
        return raw
    if isinstance(raw, str):
        try:
            return parse(raw)
        except MalformedIntegerError as exc:
            raise ValueError(exc.message) from exc
    if isinstance(raw, int) and not isinstance(raw, bool):
        if not (0 <= raw <= MAX_VALUE):
            raise ValueError(f"Snowflake out of unsigned 64-bit range: {raw}")
        return Snowflake(raw)
    raise ValueError(f"Snowflake must be a decimal string or integer, got {type(raw).__name__}")


SnowflakeStr = Annotated[
    Snowflake,
    PlainValidator(_coerce_snowflake),
    PlainSerializer(lambda s: str(s.value), return_type=str),
    WithJsonSchema({"type": "string", "pattern": "^[0-9]+$", "title": "Snowflake"}),
]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class GeneratedSnowflakes(BaseModel):
    ids: list[SnowflakeStr]
    worker: int
    process: int
    epoch: int


class DecodedSnowflake(BaseModel):
    id: SnowflakeStr
    worker: int
    process: int
    increment: int
    timestamp: int
    absolute_timestamp: int
    created_at: str | None
    epoch: int
    as_i64: int

    @classmethod
    def from_domain(cls, s: Snowflake) -> "DecodedSnowflake":
        created_at = s.created_at
        return cls(
            id=s,
            worker=s.worker,
            process=s.process,
            increment=s.increment,
            timestamp=s.timestamp,
            absolute_timestamp=s.absolute_timestamp,
            created_at=created_at.isoformat() if created_at is not None else None,
            epoch=s.epoch,
            as_i64=s.as_i64(),
        )
