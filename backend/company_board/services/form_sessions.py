from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from company_board.services.form_controller import CompanyFormController


class FormSessions:
    """Form controllers keyed by the admin's session cookie.

    Least recently used sessions are evicted past ``max_sessions``.
    """

    def __init__(self, factory: Callable[[], CompanyFormController], max_sessions: int = 256) -> None:
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: "OrderedDict[str, CompanyFormController]" = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, CompanyFormController, bool]:
        """Return (session_id, controller, created)."""
        with self._lock:
            if session_id and session_id in self._sessions:
                self._sessions.move_to_end(session_id)
                return session_id, self._sessions[session_id], False
            new_id = uuid.uuid4().hex
            controller = self._factory()
            self._sessions[new_id] = controller
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
            return new_id, controller, True

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
