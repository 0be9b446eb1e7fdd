"""Synthetic ID generator for transactions that arrive without an id.

IDs are built from a timestamp plus a monotonic sequence, never from random
jitter, so the same feed replayed through a fresh generator yields the same
ids and two rows can never collide within one pass.
"""


class SyntheticIdGenerator:
    """Timestamp + sequence ID generator, one instance per reconciliation pass.

    Layout: ``local-<timestamp_ms>-<sequence>``
      - timestamp_ms: the record's own creation time (0 when unknown)
      - sequence: strictly increasing counter, starts at 0 for each instance
    """

    _PREFIX = "local"

    def __init__(self) -> None:
        self._sequence = -1

    def next_id(self, timestamp_ms: int) -> str:
        self._sequence += 1
        return f"{self._PREFIX}-{timestamp_ms}-{self._sequence}"

    @classmethod
    def is_synthetic(cls, value: str) -> bool:
        return value.startswith(f"{cls._PREFIX}-")
