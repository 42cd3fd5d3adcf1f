from dataclasses import dataclass


@dataclass
class RateWindow:
    """Per-partition fixed window counter. Not persisted in the database."""

    partition_key: str
    window_start: int
    count: int = 0
