import json
import unittest
from unittest.mock import MagicMock, patch

from langchain_core.messages import AIMessage, ToolMessage
from sqlalchemy.exc import OperationalError

from dietplan.exceptions import InvalidArgumentError
from dietplan.services.chat_memory_service import ChatMemoryService, clear_all_sessions, session_count
from dietplan.services.chat_service import FALLBACK_CHAT_REPLY, MAX_TOOL_ROUNDS, ChatService, select_tools
from dietplan.services.tool_registry import build_diet_tools

from helpers import make_session_factory, load_sample_data


class ScriptedModel:
    """Returns the queued replies in order and records what it was sent."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.bound = None
        self.calls = []

    def bind_tools(self, tools):
        self.bound = [t.name for t in tools]
        return self

    def invoke(self, messages):
        self.calls.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _tool_call(name, args, call_id="call_1"):
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


class TestChatService(unittest.TestCase):

    def setUp(self):
        clear_all_sessions()
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)

    def tearDown(self):
        clear_all_sessions()
        self.db.close()
        self.engine.dispose()

    def test_tool_call_round(self):
        model = ScriptedModel([
            _tool_call("find_eligible_foods", {"diet_type": "LCHF", "allergens": "milk"}),
            AIMessage(content="Try grilled chicken with spinach."),
        ])
        result = ChatService(self.db, llm=model).get_chat_response("use find_eligible_foods for LCHF", "s1")

        self.assertEqual(result.source, "llm")
        self.assertEqual(result.response, "Try grilled chicken with spinach.")
        self.assertEqual(result.tools_used, ["find_eligible_foods"])
        self.assertIn("find_eligible_foods", model.bound)

        tool_message = model.calls[1][-1]
        self.assertIsInstance(tool_message, ToolMessage)
        names = [row["food_name"] for row in json.loads(tool_message.content)]
        self.assertNotIn("Cheddar cheese", names)

    def test_unknown_tool_is_reported_to_model(self):
        model = ScriptedModel([
            _tool_call("drop_tables", {}),
            AIMessage(content="I could not look that up."),
        ])
        result = ChatService(self.db, llm=model).get_chat_response("high protein foods", "s2")
        self.assertEqual(result.source, "llm")
        self.assertIn("not registered", json.loads(model.calls[1][-1].content)["error"])

    def test_model_failure_falls_back(self):
        model = ScriptedModel([RuntimeError("model offline")])
        result = ChatService(self.db, llm=model).get_chat_response("hello", "s3")
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.response, FALLBACK_CHAT_REPLY)

    def test_tool_rounds_exhausted_falls_back(self):
        model = ScriptedModel([
            _tool_call("find_high_protein_foods", {}, call_id=f"call_{i}") for i in range(MAX_TOOL_ROUNDS + 1)
        ])
        result = ChatService(self.db, llm=model).get_chat_response("high protein", "s6")
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.response, FALLBACK_CHAT_REPLY)
        self.assertEqual(result.tools_used, ["find_high_protein_foods"] * MAX_TOOL_ROUNDS)

    def test_storage_error_propagates(self):
        broken = MagicMock()
        broken.query.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
        model = ScriptedModel([_tool_call("find_eligible_foods", {"diet_type": "LCHF"})])
        with self.assertRaises(OperationalError):
            ChatService(broken, llm=model).get_chat_response("find_eligible_foods please", "s4")

    def test_empty_query_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            ChatService(self.db, llm=ScriptedModel([])).get_chat_response("   ")

    def test_history_is_replayed(self):
        model = ScriptedModel([AIMessage(content="first"), AIMessage(content="second")])
        service = ChatService(self.db, llm=model)
        service.get_chat_response("hello", "s5")
        service.get_chat_response("again", "s5")
        # system, previous user, previous ai, new user
        self.assertEqual(len(model.calls[1]), 4)
        self.assertEqual(model.calls[1][2].content, "first")


class TestToolSelection(unittest.TestCase):

    def setUp(self):
        self.tools = build_diet_tools(MagicMock())

    def test_description_match(self):
        names = [t.name for t in select_tools(self.tools, "high protein")]
        self.assertEqual(names, ["find_high_protein_foods"])

    def test_name_in_query(self):
        names = [t.name for t in select_tools(self.tools, "please run get_food_categories now")]
        self.assertEqual(names, ["get_food_categories"])

    def test_no_match(self):
        self.assertEqual(select_tools(self.tools, "what is the weather"), [])


class TestChatMemory(unittest.TestCase):

    def setUp(self):
        clear_all_sessions()

    def tearDown(self):
        clear_all_sessions()

    def test_window(self):
        memory = ChatMemoryService("window", max_messages=4)
        for i in range(3):
            memory.add_user_message(f"q{i}")
            memory.add_ai_message(f"a{i}")
        messages = memory.get_messages()
        self.assertEqual([m.content for m in messages], ["q1", "a1", "q2", "a2"])
        self.assertIsInstance(messages[-1], AIMessage)

    def test_sessions_are_shared_and_isolated(self):
        ChatMemoryService("a").add_user_message("hi")
        self.assertEqual([m.content for m in ChatMemoryService("a").get_messages()], ["hi"])
        self.assertEqual(ChatMemoryService("b").get_messages(), [])
        ChatMemoryService("a").clear()
        self.assertEqual(ChatMemoryService("a").get_messages(), [])

    @patch("dietplan.services.chat_memory_service.CHAT_MEMORY_MAX_SESSIONS", 3)
    def test_least_recently_used_sessions_are_dropped(self):
        for i in range(50):
            ChatMemoryService(f"user-{i}").add_user_message("hello")
        self.assertEqual(session_count(), 3)

        # touching a session keeps it alive
        ChatMemoryService("user-47")
        ChatMemoryService("new-1")
        ChatMemoryService("new-2")
        self.assertEqual([m.content for m in ChatMemoryService("user-47").get_messages()], ["hello"])
        self.assertEqual(ChatMemoryService("user-48").get_messages(), [])


if __name__ == '__main__':
    unittest.main()
