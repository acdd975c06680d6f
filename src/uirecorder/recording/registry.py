"""Registry of recording sessions keyed by their owner surface."""

from __future__ import annotations

from collections.abc import Callable, Hashable

from ..config.settings import RecorderSettings
from ..dispatch import OwnerDispatcher
from ..logging import get_logger
from ..tree.interfaces import TreeNode
from .session import RecordingSession

logger = get_logger(__name__)

SessionFactory = Callable[
    [TreeNode, RecorderSettings | None, OwnerDispatcher | None], RecordingSession
]


class SessionRegistry:
    """Maps an owner handle (typically a window) to its recording session.

    Hosts call ``detach`` when the owner closes so the session is disposed.

    Example:
        >>> registry = SessionRegistry()
        >>> session = registry.attach(window, window_root)
        >>> registry.attach(window, window_root) is session
        True
        >>> registry.detach(window)
    """

    def __init__(self, factory: SessionFactory | None = None) -> None:
        self._factory: SessionFactory = factory or (
            lambda root, settings, dispatcher: RecordingSession(root, settings, dispatcher)
        )
        self._sessions: dict[Hashable, RecordingSession] = {}

    def attach(
        self,
        owner: Hashable,
        root: TreeNode,
        settings: RecorderSettings | None = None,
        dispatcher: OwnerDispatcher | None = None,
    ) -> RecordingSession:
        """Get the owner's session, creating it on first attach.

        Settings and dispatcher only apply when the session is created. Without a
        dispatcher the session binds a QueueDispatcher to the calling thread.
        """
        session = self._sessions.get(owner)
        if session is not None:
            return session

        session = self._factory(root, settings, dispatcher)
        self._sessions[owner] = session
        logger.info("session_attached", owner=repr(owner), sessions=len(self._sessions))
        return session

    def detach(self, owner: Hashable) -> bool:
        """Dispose and forget the owner's session.

        Returns:
            True if a session was attached
        """
        session = self._sessions.pop(owner, None)
        if session is None:
            return False
        session.dispose()
        logger.info("session_detached", owner=repr(owner), sessions=len(self._sessions))
        return True

    def get(self, owner: Hashable) -> RecordingSession | None:
        return self._sessions.get(owner)

    def close_all(self) -> None:
        for owner in list(self._sessions):
            self.detach(owner)

    def __contains__(self, owner: object) -> bool:
        return owner in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
