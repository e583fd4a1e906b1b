import json

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from models.keyword_models import KeywordRecord


SAMPLE_KEYWORDS = [
    {
        "term": "wireless earbuds",
        "classification": "Attack",
        "intentScore": 9,
        "competition": "Low",
        "searchVolumeEst": 12000,
        "isOrganic": True,
        "isSponsored": True,
        "asinOverlap": 3,
        "recommendation": "PPC-Exact",
        "reasoning": "High intent, already ranking",
    },
    {
        "term": "bluetooth earbuds for running",
        "classification": "Attack",
        "intentScore": 8,
        "competition": "Medium",
        "searchVolumeEst": 5400,
        "isOrganic": False,
        "isSponsored": False,
        "asinOverlap": 1,
        "recommendation": "PPC-Phrase",
        "reasoning": "Competitors rank, we do not",
    },
    {
        "term": "earbud case",
        "classification": "Support",
        "intentScore": 5,
        "competition": "Low",
        "searchVolumeEst": 2100,
        "isOrganic": False,
        "isSponsored": False,
        "asinOverlap": 2,
        "recommendation": "Backend",
        "reasoning": "Accessory term, useful for indexing",
    },
    {
        "term": "headphones",
        "classification": "Waste",
        "intentScore": 3,
        "competition": "High",
        "searchVolumeEst": 90000,
        "isOrganic": True,
        "isSponsored": False,
        "asinOverlap": 0,
        "recommendation": "Negative",
        "reasoning": "Too broad",
    },
    {
        "term": "noise cancelling earbuds",
        "classification": "Support",
        "intentScore": 6,
        "competition": "High",
        "searchVolumeEst": 30000,
        "isOrganic": False,
        "isSponsored": True,
        "asinOverlap": 2,
        "recommendation": "Title",
        "reasoning": "Feature keyword for the title",
    },
]


@pytest.fixture
def sample_payload():
    return json.loads(json.dumps(SAMPLE_KEYWORDS))


@pytest.fixture
def sample_records(sample_payload):
    return [KeywordRecord.model_validate(item) for item in sample_payload]


@pytest.fixture
def model_text(sample_payload):
    """LLM がよく返す「前置き + コードフェンス + JSON」の形。"""
    return "Sure! ```json\n" + json.dumps(sample_payload) + "\n``` thanks"


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def fake_llm(monkeypatch, model_text):
    """ワークフローから呼ばれる LLM 呼び出しを差し替え、呼び出し履歴を返す。"""
    calls = []

    def _fake_request(asins):
        calls.append(list(asins))
        return model_text

    monkeypatch.setattr("app.graph.nodes.request_reverse_asin_analysis", _fake_request)
    return calls


@pytest.fixture
def make_record():
    """必須項目を埋めた KeywordRecord を作るファクトリ。"""

    def _make(**overrides):
        fields = {
            "term": "keyword",
            "classification": "Support",
            "intent_score": 5,
            "competition": "Medium",
            "search_volume_est": 0,
            "is_organic": False,
            "is_sponsored": False,
            "asin_overlap": 0,
            "recommendation": "Ignore",
            "reasoning": "",
        }
        fields.update(overrides)
        return KeywordRecord(**fields)

    return _make
