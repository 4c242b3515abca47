import json
import logging
from typing import List, Optional

from langchain_core.messages import SystemMessage, HumanMessage, ToolMessage
from langchain_core.tools import StructuredTool
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dietplan.exceptions import InvalidArgumentError, ToolNotFoundError
from dietplan.schemas.meal_plan import ChatResponse
from dietplan.services.chat_memory_service import ChatMemoryService
from dietplan.services.llm_service import get_llm, log_token_usage
from dietplan.services.tool_registry import build_diet_tools, call_tool

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = (
    "You are a diet planning assistant for people managing diabetes. "
    "Use the available tools to look up foods, nutrients and LCHF / LFV diet rules "
    "before answering. Keep answers short and factual."
)

FALLBACK_CHAT_REPLY = "I'm having trouble answering right now. Please try again later."

MAX_TOOL_ROUNDS = 3


def select_tools(tools: List[StructuredTool], query: str) -> List[StructuredTool]:
    """Tools whose description contains the query, or whose name appears in it."""
    q = query.lower()
    return [t for t in tools if q in t.description.lower() or t.name.lower() in q]


class ChatService:
    """
    The Brain: answers free-text questions with an LLM that may call the
    diet tools. Keeps a short per-session message window.
    """

    def __init__(self, db: Session, llm=None):
        self.db = db
        self.llm = llm
        self.tools = build_diet_tools(db)

    def get_chat_response(self, query: str, session_id: str = "default") -> ChatResponse:
        if query is None or not query.strip():
            raise InvalidArgumentError("Query cannot be empty", field="query")

        memory = ChatMemoryService(session_id)
        selected = select_tools(self.tools, query)
        logger.info(f"[Chat] Session {session_id}: {len(selected)} tools selected {[t.name for t in selected]}")

        messages = [SystemMessage(content=CHAT_SYSTEM_PROMPT)]
        messages.extend(memory.get_messages())
        messages.append(HumanMessage(content=query))

        tools_used: List[str] = []
        try:
            reply = self._run(messages, selected, tools_used)
            source = "llm"
            if reply is None:
                reply, source = FALLBACK_CHAT_REPLY, "fallback"
        except SQLAlchemyError:
            raise
        except Exception as e:
            logger.error(f"[Chat] LLM call failed: {e}")
            reply = FALLBACK_CHAT_REPLY
            source = "fallback"

        memory.add_user_message(query)
        memory.add_ai_message(reply)
        return ChatResponse(response=reply, source=source, session_id=session_id, tools_used=tools_used)

    def _run(self, messages, selected: List[StructuredTool], tools_used: List[str]) -> Optional[str]:
        model = self.llm or get_llm(temperature=0.3)
        if selected:
            model = model.bind_tools(selected)

        response = model.invoke(messages)
        log_token_usage(response)

        rounds = 0
        while getattr(response, "tool_calls", None) and rounds < MAX_TOOL_ROUNDS:
            rounds += 1
            messages.append(response)
            for tool_call in response.tool_calls:
                tools_used.append(tool_call["name"])
                messages.append(ToolMessage(
                    content=self._execute(selected, tool_call["name"], tool_call.get("args") or {}),
                    tool_call_id=tool_call["id"],
                ))
            response = model.invoke(messages)
            log_token_usage(response)

        if getattr(response, "tool_calls", None) or not response.content:
            logger.warning(f"[Chat] No final answer after {rounds} tool rounds. Using fallback reply.")
            return None
        return response.content

    @staticmethod
    def _execute(tools: List[StructuredTool], name: str, args: dict) -> str:
        """Tool output as JSON text. Argument errors go back to the model instead of aborting the chat."""
        try:
            result = call_tool(tools, name, args)
        except (InvalidArgumentError, ToolNotFoundError, ValidationError) as e:
            logger.warning(f"[Chat] Tool {name} rejected arguments {args}: {e}")
            return json.dumps({"error": str(e)})
        return json.dumps(result)
