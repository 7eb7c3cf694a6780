"""
Slack session lifecycle as an explicit state machine.

    DISCONNECTED → CONNECTING → READY → CLOSING → CLOSED

Entering READY runs the on_ready action once. close() is always the last step of
start(), so the session ends CLOSED whether or not the action raised.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from slack_sdk import WebClient

from auth.slack_auth import verify_token
from delivery import slack_sender
from delivery.slack_sender import SlackUser

log = logging.getLogger(__name__)


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSING = "closing"
    CLOSED = "closed"


_TRANSITIONS = {
    SessionState.DISCONNECTED: {SessionState.CONNECTING},
    SessionState.CONNECTING: {SessionState.READY, SessionState.CLOSING},
    SessionState.READY: {SessionState.CLOSING},
    SessionState.CLOSING: {SessionState.CLOSED},
    SessionState.CLOSED: set(),
}


class SessionStateError(RuntimeError):
    pass


class SlackSession:
    def __init__(
        self,
        token: str,
        on_ready: Optional[Callable[["SlackSession"], None]] = None,
        client_factory: Callable[..., WebClient] = WebClient,
    ):
        self._token = token
        self._on_ready = on_ready
        self._client_factory = client_factory
        self._client: Optional[WebClient] = None
        self.state = SessionState.DISCONNECTED
        self.identity: Optional[dict] = None

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise SessionStateError(f"Cannot go from {self.state.value} to {target.value}")
        log.debug(f"Session {self.state.value} → {target.value}")
        self.state = target

    def _require_ready(self) -> WebClient:
        if self.state is not SessionState.READY:
            raise SessionStateError(f"Session is {self.state.value}, not ready")
        return self._client

    def connect(self) -> None:
        """Establish the session and run the on_ready action on entry to READY."""
        self._transition(SessionState.CONNECTING)
        self._client = self._client_factory(token=self._token)
        try:
            self.identity = verify_token(self._client)
        except Exception:
            self.close()
            raise
        self._transition(SessionState.READY)
        log.info("Slack session ready.")
        if self._on_ready is not None:
            self._on_ready(self)

    def fetch_user(self, user_id: str) -> SlackUser:
        return slack_sender.fetch_user(self._require_ready(), user_id)

    def send(self, user: SlackUser, text: str) -> None:
        slack_sender.send_direct_message(self._require_ready(), user, text)

    def close(self) -> None:
        if self.state is SessionState.CLOSED:
            return
        if self.state is SessionState.DISCONNECTED:
            raise SessionStateError("Session was never connected")
        self._transition(SessionState.CLOSING)
        # WebClient holds no open connection; dropping it ends the session.
        self._client = None
        self._transition(SessionState.CLOSED)
        log.info("Slack session closed.")

    def start(self) -> None:
        """connect → on_ready → close, closing even when the action fails."""
        try:
            self.connect()
        finally:
            if self.state is not SessionState.DISCONNECTED:
                self.close()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
