import json
import logging
import re
from typing import Any, Dict, Optional

from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage

from config import LLM_PROVIDER, LLM_API_KEY, LLM_MODEL as OVERRIDE_MODEL, OLLAMA_URL

logger = logging.getLogger(__name__)

# If LLM_MODEL is set in env, it overrides everything.
DEFAULT_MODELS = {
    "ollama": "llama3.1",
    "openrouter": "google/gemini-2.0-flash-001",
    "openai": "gpt-4o-mini",
}

MODEL_NAME = OVERRIDE_MODEL if OVERRIDE_MODEL else DEFAULT_MODELS.get(LLM_PROVIDER, "gpt-4o-mini")

# Base URLs for paid providers
PROVIDER_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": None,  # Uses default OpenAI URL
}


def get_llm(temperature: float = 0.7, max_tokens: int = 2000, json_mode: bool = False):
    """
    Factory function to get a configured LangChain Chat Model instance.
    Supports: Ollama (Local), OpenRouter, OpenAI
    """
    if LLM_PROVIDER in ["openrouter", "openai"]:
        if not LLM_API_KEY:
            logger.error(f"[LLM Service] Missing API Key for provider {LLM_PROVIDER}")

        model_kwargs = {}
        if json_mode:
            model_kwargs["response_format"] = {"type": "json_object"}

        return ChatOpenAI(
            model=MODEL_NAME,
            api_key=LLM_API_KEY,
            base_url=PROVIDER_URLS.get(LLM_PROVIDER),
            temperature=temperature,
            max_tokens=max_tokens,
            model_kwargs=model_kwargs,
            timeout=60.0,
        )

    if LLM_PROVIDER != "ollama":
        logger.warning(f"[LLM Service] Unknown provider '{LLM_PROVIDER}'. Defaulting to Ollama.")

    return ChatOllama(
        base_url=OLLAMA_URL,
        model=MODEL_NAME,
        temperature=temperature,
        num_predict=max_tokens,
        format="json" if json_mode else "",
    )


def log_token_usage(response) -> int:
    """Logs prompt/completion token counts reported by the provider. Returns the total."""
    metadata = getattr(response, "response_metadata", None) or {}

    # Ollama reports counts at the top level
    input_tokens = metadata.get("prompt_eval_count") or 0
    output_tokens = metadata.get("eval_count") or 0

    # OpenAI-compatible providers nest them under usage / token_usage
    if input_tokens == 0 and output_tokens == 0:
        usage = metadata.get("token_usage") or metadata.get("usage") or {}
        input_tokens = usage.get("prompt_tokens") or usage.get("input_tokens") or 0
        output_tokens = usage.get("completion_tokens") or usage.get("output_tokens") or 0

    total = input_tokens + output_tokens
    if total:
        logger.info(f"[LLM Stats] Input: {input_tokens}, Output: {output_tokens}, Total: {total}")
    return total


def call_llm(system_prompt: str, user_prompt: str, temperature: float = 0.7,
             max_tokens: int = 2000, llm=None) -> str:
    """
    Executes a standard chat request. Provider errors propagate to the caller,
    which decides on a fallback.
    """
    llm = llm or get_llm(temperature=temperature, max_tokens=max_tokens)
    logger.info(f"[LLM Service] Calling Model (Text): {MODEL_NAME}")

    response = llm.invoke([
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt),
    ])
    log_token_usage(response)
    return response.content or ""


def parse_json_from_text(text: str) -> Optional[Dict[str, Any]]:
    """Pulls the first JSON object out of a model reply (which may be fenced in markdown)."""
    if not text:
        return None
    cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", text.strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if not match:
            return None
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
