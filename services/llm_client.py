# services/llm_client.py
from openai import OpenAI

from app.config import settings
from services.errors import AIServiceError

_client: OpenAI | None = None


def get_openai_client() -> OpenAI:
    global _client
    if _client is None:
        if not settings.openai_api_key:
            raise AIServiceError("OPENAI_API_KEY is not set.")
        _client = OpenAI(api_key=settings.openai_api_key)
    return _client
