"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Snowflake codec
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Snowflake codec ---

class MalformedIntegerError(AppError):
    def __init__(self, text: str) -> None:
        super().__init__(
            1001,
            f"Not an unsigned 64-bit decimal integer: {text!r}",
            422,
        )
        self.text = text


class FieldOutOfRangeError(AppError):
    def __init__(self, field: str, value: int, maximum: int) -> None:
        super().__init__(
            1002,
            f"Snowflake field {field} out of range: {value} (allowed 0-{maximum})",
            422,
        )
        self.field = field
        self.value = value
        self.maximum = maximum


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9001, detail, 500)
