import json
import os
import time
from typing import Any, Dict, List

from loguru import logger

from tools.redis_client import connect_redis

MAX_TURNS = 20
DEFAULT_TTL = int(os.getenv("CHAT_SESSION_TTL", "86400"))


class ChatSessionStore:
    """Keyed store of chatbot conversation turns, shared across app instances via Redis."""

    def __init__(self, client=None, ttl: int = DEFAULT_TTL, max_turns: int = MAX_TURNS):
        self.r = client if client is not None else connect_redis()
        self.ttl = ttl
        self.max_turns = max_turns
        self._memory: Dict[str, List[Dict[str, Any]]] = {}
        self._expires: Dict[str, float] = {}
        self._owners: Dict[str, set] = {}

    @staticmethod
    def _key(session_id: str) -> str:
        return f"chat:session:{session_id}"

    @staticmethod
    def _owner_key(user_id: str) -> str:
        return f"chat:user:{user_id}"

    def _expired(self, session_id: str) -> bool:
        deadline = self._expires.get(session_id)
        if deadline is not None and deadline <= time.time():
            self._memory.pop(session_id, None)
            self._expires.pop(session_id, None)
            return True
        return False

    def _prune(self) -> None:
        """Evict expired in-memory sessions and drop them from owner sets."""
        now = time.time()
        for session_id in [sid for sid, deadline in self._expires.items() if deadline <= now]:
            self._memory.pop(session_id, None)
            self._expires.pop(session_id, None)
        for user_id in list(self._owners):
            live = {sid for sid in self._owners[user_id] if sid in self._memory}
            if live:
                self._owners[user_id] = live
            else:
                del self._owners[user_id]

    def get(self, session_id: str) -> List[Dict[str, Any]]:
        """Return the stored turns of a session, oldest first."""
        if self.r:
            return [json.loads(item) for item in self.r.lrange(self._key(session_id), 0, -1)]
        if self._expired(session_id):
            return []
        return list(self._memory.get(session_id, []))

    def append(self, session_id: str, turn: Dict[str, Any]) -> None:
        """
        Append a turn, keeping only the most recent turns of the session.

        Args:
            session_id: Conversation identifier
            turn: Turn payload with role, content, timestamp and user_id
        """
        user_id = turn.get("user_id")
        if self.r:
            key = self._key(session_id)
            pipe = self.r.pipeline()
            pipe.rpush(key, json.dumps(turn, default=str))
            pipe.ltrim(key, -self.max_turns, -1)
            pipe.expire(key, self.ttl)
            if user_id:
                pipe.sadd(self._owner_key(user_id), session_id)
                pipe.expire(self._owner_key(user_id), self.ttl)
            pipe.execute()
        else:
            self._prune()
            turns = self._memory.setdefault(session_id, [])
            turns.append(turn)
            del turns[:-self.max_turns]
            self._expires[session_id] = time.time() + self.ttl
            if user_id:
                self._owners.setdefault(user_id, set()).add(session_id)

    def clear(self, session_id: str) -> None:
        if self.r:
            self.r.delete(self._key(session_id))
        else:
            self._memory.pop(session_id, None)
            self._expires.pop(session_id, None)
            self._prune()
        logger.info(f"Cleared chat session {session_id}")

    def expire(self, session_id: str, ttl: int) -> None:
        """Set the time-to-live of a session in seconds."""
        if self.r:
            self.r.expire(self._key(session_id), ttl)
        elif session_id in self._memory:
            self._expires[session_id] = time.time() + ttl

    def sessions_for(self, user_id: str) -> List[str]:
        """Session ids the user has written to that still hold turns."""
        if self.r:
            session_ids = self.r.smembers(self._owner_key(user_id))
        else:
            self._prune()
            session_ids = set(self._owners.get(user_id, set()))
        return [sid for sid in session_ids if self.get(sid)]


# Global chat session store instance
session_store = ChatSessionStore()


def get_session_store() -> ChatSessionStore:
    return session_store
