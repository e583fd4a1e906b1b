# agents/reverse_asin_agent.py

from __future__ import annotations

import logging
from typing import List

from openai import OpenAIError

from app.config import settings
from services.errors import AIServiceError
from services.llm_client import get_openai_client

logger = logging.getLogger(__name__)


# ============================================================
# プロンプト（差し込み箇所は {asins} の 1 か所だけ）
# ============================================================

REVERSE_ASIN_PROMPT = """
You are an expert Amazon SEO and PPC algorithm specialist.

TASK:
Perform a "Reverse ASIN" keyword analysis for the following Amazon ASINs: {asins}.

Step 1: Use web search to identify what products these ASINs actually are (Title, Category, Niche).
CRITICAL: If you cannot find specific details for an ASIN (e.g. it doesn't exist or search fails), simply INFER the likely product category and proceed. DO NOT STOP. DO NOT APOLOGIZE.

Step 2: Generate a list of 30-40 highly relevant keywords based on the identified product niche.

Step 3: Classify and analyze each keyword based on the rules below.

Output Format:
You must output ONLY a valid JSON array.
Do not output any introductory text (like "I have analyzed..." or "Here is the JSON").
Do not output any markdown formatting (like ```json).
Just start with [ and end with ].

Each object in the array must match this structure exactly:
{{
  "term": "keyword phrase",
  "classification": "Attack" | "Support" | "Waste",
  "intentScore": number (0-10),
  "competition": "Low" | "Medium" | "High",
  "searchVolumeEst": number,
  "isOrganic": boolean,
  "isSponsored": boolean,
  "asinOverlap": number,
  "recommendation": "Title" | "Bullets" | "Backend" | "PPC-Exact" | "PPC-Phrase" | "Negative" | "Ignore",
  "reasoning": "Short explanation"
}}

Classification Rules:
- Attack: High Buyer Intent (Score 8-10), Low/Medium Competition.
- Support: Relevance builders, broad terms, indexing terms.
- Waste: High traffic but low intent, or irrelevant terms.

Recommendation Rules:
- Choose the single best action for the seller.
- Be specific: "PPC-Exact" for high intent, "Negative" for waste.
""".strip()


def build_prompt(asins: List[str]) -> str:
    """ASIN をカンマ区切りで差し込んだプロンプトを返す。"""
    return REVERSE_ASIN_PROMPT.format(asins=", ".join(asins))


def _tools() -> list:
    if not settings.openai_web_search:
        return []
    return [{"type": settings.openai_web_search_tool}]


# ============================================================
# 公開関数
# ============================================================

def request_reverse_asin_analysis(asins: List[str]) -> str:
    """
    LLM に Reverse ASIN 分析を 1 回だけ依頼し、生のテキストを返す。

    - リトライ・タイムアウト制御はしない（SDK のデフォルトのまま）
    - SDK 側のエラーは AIServiceError に包み直す（メッセージはサービス側の文言）
    - JSON の取り出しは response_normalizer 側で行う
    """
    client = get_openai_client()
    model = settings.openai_model

    logger.info(
        "[reverse_asin] LLM call start asins=%d model=%s web_search=%s",
        len(asins),
        model,
        settings.openai_web_search,
    )

    try:
        response = client.responses.create(
            model=model,
            input=build_prompt(asins),
            tools=_tools(),
            temperature=settings.openai_temperature,
        )
    except OpenAIError as e:
        logger.error("[reverse_asin] LLM call failed: %s", e)
        raise AIServiceError(str(e) or "The AI service request failed.") from e

    text = getattr(response, "output_text", None) or ""
    usage = getattr(response, "usage", None)
    logger.info(
        "[reverse_asin] LLM response received length=%d total_tokens=%s",
        len(text),
        getattr(usage, "total_tokens", None) if usage else None,
    )

    if not text.strip():
        raise AIServiceError("No data returned from the AI service.")

    return text
