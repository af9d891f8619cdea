"""Constants shared across modules."""
from __future__ import annotations


class CONSUMER_EVENT:
    CONSUME = "consume"
    END = "end"
    # Emitting this on a consumer closes it.
    CLOSE_REQUEST = "close_consumer"
