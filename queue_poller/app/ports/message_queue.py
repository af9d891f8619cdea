"""Port: pollable queue handle. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Any, Mapping, Protocol


class MessageQueue(Protocol):
    """Queue handle polled by the Consumer.

    get() must not block: it returns the next message, or a falsy value when
    nothing is available right now. The remaining operations are forwarded
    verbatim by the Consumer; their return values (awaitables included) are
    whatever the broker client hands back.
    """

    def get(self) -> Any: ...

    def ack(self, *args: Any, **kwargs: Any) -> Any: ...

    def nack(self, *args: Any, **kwargs: Any) -> Any: ...

    def reject(self, *args: Any, **kwargs: Any) -> Any: ...

    def cancel(self, *args: Any, **kwargs: Any) -> Any: ...

    def purge(self, *args: Any, **kwargs: Any) -> Any: ...

    def get_argument(self, name: str) -> Any: ...

    def get_arguments(self) -> Mapping[str, Any]: ...

    def has_argument(self, name: str) -> bool: ...

    def get_name(self) -> str: ...

    def get_consumer_tag(self) -> str | None: ...
