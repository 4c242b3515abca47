import threading
import warnings
from collections import OrderedDict
from typing import List

from langchain_core._api.deprecation import LangChainDeprecationWarning
from langchain_core.chat_history import InMemoryChatMessageHistory
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from config import CHAT_MEMORY_MAX_MESSAGES, CHAT_MEMORY_MAX_SESSIONS

# Suppress LangChain deprecation chatter from the in-memory history
warnings.filterwarnings("ignore", category=LangChainDeprecationWarning)

# session_id -> history, least recently used first
_histories: "OrderedDict[str, InMemoryChatMessageHistory]" = OrderedDict()
_lock = threading.Lock()


def _session_history(session_id: str) -> InMemoryChatMessageHistory:
    with _lock:
        history = _histories.get(session_id)
        if history is None:
            history = InMemoryChatMessageHistory()
            _histories[session_id] = history
        _histories.move_to_end(session_id)
        while len(_histories) > CHAT_MEMORY_MAX_SESSIONS:
            _histories.popitem(last=False)
        return history


class ChatMemoryService:
    """
    The Notepad: per-session chat history kept in process memory.
    Only the last `max_messages` messages are retained, and only the
    CHAT_MEMORY_MAX_SESSIONS most recently used sessions are kept.
    """

    def __init__(self, session_id: str, max_messages: int = CHAT_MEMORY_MAX_MESSAGES):
        self.session_id = session_id
        self.max_messages = max_messages
        self.history = _session_history(session_id)

    def add_user_message(self, message: str):
        self.history.add_messages([HumanMessage(content=message)])
        self._trim_history()

    def add_ai_message(self, message: str):
        self.history.add_messages([AIMessage(content=message)])
        self._trim_history()

    def get_messages(self) -> List[BaseMessage]:
        return list(self.history.messages)

    def clear(self):
        self.history.clear()

    def _trim_history(self):
        with _lock:
            overflow = len(self.history.messages) - self.max_messages
            if overflow > 0:
                self.history.messages = self.history.messages[overflow:]


def session_count() -> int:
    with _lock:
        return len(_histories)


def clear_all_sessions():
    with _lock:
        _histories.clear()
