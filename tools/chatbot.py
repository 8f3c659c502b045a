from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from prompts.chatbot import APOLOGY, system_prompt
from tools import llm
from tools.llm import ModelInvocationError
from tools.session_store import ChatSessionStore, get_session_store

PREVIEW_CHARS = 50


class SessionAccessError(Exception):
    """Raised when a user touches a chat session another user wrote to."""


class Chatbot:
    """Customer-service chatbot whose conversation history lives in the session store."""

    def __init__(self, store: Optional[ChatSessionStore] = None):
        self._store = store

    @property
    def store(self) -> ChatSessionStore:
        return self._store or get_session_store()

    def process_message(self, session_id: str, message: str, business: Dict[str, Any],
                        user_id: str) -> Dict[str, Any]:
        """
        Answer a customer message in the context of its session.

        Args:
            session_id: Conversation identifier
            message: Customer message
            business: Business profile the assistant speaks for
            user_id: Owner of the session

        Returns:
            Dict with response, session_id, timestamp and error flag
        """
        self._check_owner(session_id, user_id)
        turns = self.history(session_id, user_id)
        messages = [{"role": "system", "content": system_prompt(business)}]
        messages += [{"role": t["role"], "content": t["content"]} for t in turns]
        messages.append({"role": "user", "content": message})

        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            reply = llm.chat(messages, temperature=0.7, max_tokens=1000)
        except ModelInvocationError as e:
            logger.error(f"Chatbot processing error for session {session_id}: {e}")
            return {"response": APOLOGY, "session_id": session_id, "timestamp": timestamp, "error": True}

        self.store.append(session_id, {"role": "user", "content": message,
                                       "timestamp": timestamp, "user_id": user_id})
        self.store.append(session_id, {"role": "assistant", "content": reply,
                                       "timestamp": datetime.now(timezone.utc).isoformat(), "user_id": user_id})

        return {"response": reply, "session_id": session_id, "timestamp": timestamp, "error": False}

    def _check_owner(self, session_id: str, user_id: str) -> None:
        if any(t.get("user_id") != user_id for t in self.store.get(session_id)):
            logger.warning(f"User {user_id} denied access to chat session {session_id}")
            raise SessionAccessError(f"Session {session_id} belongs to another user")

    def history(self, session_id: str, user_id: str) -> List[Dict[str, Any]]:
        """Turns of a session written by the user."""
        return [t for t in self.store.get(session_id) if t.get("user_id") == user_id]

    def clear(self, session_id: str, user_id: str) -> None:
        """
        Delete a session the user owns.

        Raises:
            SessionAccessError: If another user wrote to the session
        """
        self._check_owner(session_id, user_id)
        self.store.clear(session_id)

    def sessions_for(self, user_id: str) -> List[Dict[str, Any]]:
        """Summaries of the user's sessions, most recently active first."""
        sessions = []
        for session_id in self.store.sessions_for(user_id):
            turns = self.history(session_id, user_id)
            user_turns = [t for t in turns if t["role"] == "user"]
            if not user_turns:
                continue
            sessions.append({
                "session_id": session_id,
                "message_count": len(user_turns),
                "last_activity": turns[-1]["timestamp"],
                "preview": user_turns[0]["content"][:PREVIEW_CHARS] + "..."
            })
        sessions.sort(key=lambda s: s["last_activity"], reverse=True)
        return sessions


# Global chatbot instance
chatbot = Chatbot()
