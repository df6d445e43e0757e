"""Process-wide map of session name to session state."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional

from .errors import SessionNotFound
from .session import SessionConfig, SessionState

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, looks up and tears down sessions.

    The registry lock only guards the name map; work on a session runs under
    that session's own lock so distinct sessions never wait on each other.
    """

    def __init__(
        self,
        factory: Callable[[str, SessionConfig], SessionState],
        default_config: Optional[SessionConfig] = None,
    ) -> None:
        self._factory = factory
        self._default_config = default_config or SessionConfig()
        self._sessions: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def get_or_create(self, name: str, config: Optional[SessionConfig] = None) -> SessionState:
        with self._lock:
            state = self._sessions.get(name)
            if state is None:
                state = self._factory(name, config or self._default_config)
                self._sessions[name] = state
                logger.info("session %s created", name)
            return state

    def get(self, name: str) -> SessionState:
        with self._lock:
            try:
                return self._sessions[name]
            except KeyError:
                raise SessionNotFound(name) from None

    def remove(self, name: str) -> None:
        with self._lock:
            if self._sessions.pop(name, None) is None:
                raise SessionNotFound(name)
        logger.info("session %s removed", name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._sessions
