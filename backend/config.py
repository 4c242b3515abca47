import os
from dotenv import load_dotenv

load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./dietplan.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Alembic on startup; create_all always runs afterwards
RUN_MIGRATIONS_ON_STARTUP = os.getenv("RUN_MIGRATIONS_ON_STARTUP", "true").lower() in ("1", "true", "yes")

# LLM Selection Configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "ollama").lower() # Options: ollama, openrouter, openai
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENROUTER_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL") # Optional override
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")

USDA_API_KEY = os.getenv("USDA_API_KEY")

# Upper bound on eligible foods embedded into a generated prompt
ELIGIBLE_FOODS_LIMIT = int(os.getenv("ELIGIBLE_FOODS_LIMIT", "30"))

CHAT_MEMORY_MAX_MESSAGES = int(os.getenv("CHAT_MEMORY_MAX_MESSAGES", "10"))
# Least recently used sessions are dropped past this count
CHAT_MEMORY_MAX_SESSIONS = int(os.getenv("CHAT_MEMORY_MAX_SESSIONS", "500"))
