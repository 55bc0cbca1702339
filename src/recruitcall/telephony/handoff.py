"""
Handoff responder.

Answers the telephony provider's "call answered, what now?" request with
markup that streams the call's media to the published agent session.
"""

from __future__ import annotations

from dataclasses import dataclass

from recruitcall.sessions.registry import DEFAULT_SESSION_KEY, SessionStore
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)

NOT_READY_MESSAGE = "Agent not ready yet"


def _twiml(s: str) -> str:
    return '<?xml version="1.0" encoding="UTF-8"?>\n<Response>' + s + "</Response>"


def _xml_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


@dataclass(frozen=True)
class HandoffResponse:
    status_code: int
    body: str
    media_type: str = "text/xml"


class HandoffResponder:
    """Renders connection instructions from the registry's current session.

    Read-only: never writes to the registry, so repeated provider requests
    get the same answer until the next orchestration run publishes.
    """

    def __init__(
        self,
        registry: SessionStore,
        key: str = DEFAULT_SESSION_KEY,
        not_ready_message: str = NOT_READY_MESSAGE,
    ) -> None:
        self._registry = registry
        self._key = key
        self._not_ready_message = not_ready_message

    def respond(self) -> HandoffResponse:
        handle = self._registry.get(self._key)

        if handle is None:
            logger.warning("Handoff requested before any session was published")
            return HandoffResponse(
                status_code=503,
                body=_twiml(f"<Say>{_xml_escape(self._not_ready_message)}</Say>"),
            )

        logger.info("Handoff served", extra={"join_url": handle.join_url})
        return HandoffResponse(
            status_code=200,
            body=_twiml(
                f'<Connect><Stream url="{_xml_escape(handle.join_url)}"/></Connect>'
            ),
        )
