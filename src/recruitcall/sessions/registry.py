"""
In-process registry of published agent sessions.

The registry bridges two request lifecycles: the orchestration run that
provisions a session writes it, and the telephony handoff callback that fires
later reads it. It is keyed so a per-call extension only has to pick keys;
today every writer and reader uses ``DEFAULT_SESSION_KEY``.

Semantics:
- ``set`` unconditionally replaces the value under a key (last write wins).
- ``get`` returns the current value or ``None`` when nothing was published.
- No expiry and no clear: a handle stays live until overwritten.

Reads and writes are single dict operations executed on the event loop, so a
``get`` racing a ``set`` sees either the old or the new handle, never a
partial one. No lock is taken.
"""

from __future__ import annotations

from typing import Protocol

from recruitcall.sessions.models import SessionHandle
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_KEY = "current"


class SessionStore(Protocol):
    def set(self, handle: SessionHandle, key: str = DEFAULT_SESSION_KEY) -> None: ...

    def get(self, key: str = DEFAULT_SESSION_KEY) -> SessionHandle | None: ...


class SessionRegistry:
    """Process-wide, in-memory ``SessionStore``."""

    def __init__(self) -> None:
        self._handles: dict[str, SessionHandle] = {}

    def set(self, handle: SessionHandle, key: str = DEFAULT_SESSION_KEY) -> None:
        previous = self._handles.get(key)
        self._handles[key] = handle
        if previous is not None and previous.join_url != handle.join_url:
            # A second run replaced a handle whose call may still be ringing
            logger.warning(
                "Session handle overwritten",
                extra={
                    "key": key,
                    "previous_session_id": previous.session_id,
                    "session_id": handle.session_id,
                },
            )
        else:
            logger.info(
                "Session handle published",
                extra={"key": key, "session_id": handle.session_id},
            )

    def get(self, key: str = DEFAULT_SESSION_KEY) -> SessionHandle | None:
        return self._handles.get(key)

    def is_ready(self, key: str = DEFAULT_SESSION_KEY) -> bool:
        return key in self._handles
