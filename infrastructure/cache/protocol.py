"""ChallengeStore protocol — services depend on this, not the concrete implementation.

Any key/value store with per-key expiry satisfies it. Values are the
serialized digit strings produced by shared.challenge.encode_challenge.
Implementations raise errors.StoreUnavailableError when the backend fails.
"""

from typing import Optional, Protocol, Union, runtime_checkable

StoredValue = Union[str, bytes]


@runtime_checkable
class ChallengeStore(Protocol):
    async def get(self, key: str) -> Optional[StoredValue]: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def pop(self, key: str) -> Optional[StoredValue]:
        """Atomically return and delete *key*; None if absent or expired."""
        ...

    async def ping(self) -> bool: ...
