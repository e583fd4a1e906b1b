# app/config.py

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- OpenAI ----------
    # OPENAI_API_KEY=sk-xxxx... を .env に書く想定
    openai_api_key: str | None = None

    # モデル名を変えたい場合は .env に OPENAI_MODEL=gpt-4.1 などと書く
    openai_model: str = "gpt-4.1-mini"

    # フォーマット遵守を優先して低めにしておく
    openai_temperature: float = 0.1

    # ASIN の実体（商品名・カテゴリ）を調べさせるための Web 検索ツール
    openai_web_search: bool = True
    openai_web_search_tool: str = "web_search_preview"

    # ---------- 分析 ----------
    # 1 回の分析で受け付ける ASIN の上限
    max_asins: int = Field(30, ge=1)

    # True にすると classification / competition / recommendation が
    # 想定外の値のレコードを含むレスポンスをエラー扱いにする
    strict_records: bool = False

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
