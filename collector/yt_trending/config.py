"""設定モジュール — 環境変数・定数定義."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta, timezone
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

from yt_trending.models import Category

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- YouTube Data API ---
VIDEOS_API_URL = "https://www.googleapis.com/youtube/v3/videos"
API_KEY_ENV = "YOUTUBE_API_KEY"

# --- カテゴリ（この順で収集する。表示名はフロントエンドの表示データ） ---
CATEGORIES: MappingProxyType[str, Category] = MappingProxyType({
    c.key: c
    for c in (
        Category("all", None, "전체", "🌍"),
        Category("film", "1", "영화/애니", "🎥"),
        Category("autos", "2", "자동차", "🚗"),
        Category("music", "10", "음악", "🎵"),
        Category("pets", "15", "반려동물", "🐱"),
        Category("sports", "17", "스포츠", "⚽"),
        Category("travel", "19", "여행", "✈️"),
        Category("gaming", "20", "게임", "🎮"),
        Category("people", "22", "브이로그", "📹"),
        Category("comedy", "23", "코미디", "😂"),
        Category("entertainment", "24", "엔터테인먼트", "🎬"),
        Category("news", "25", "뉴스", "📰"),
        Category("howto", "26", "하우투/스타일", "🎨"),
        Category("education", "27", "교육", "📚"),
        Category("science", "28", "과학/기술", "🔬"),
    )
})

# --- 地域 ---
DEFAULT_REGIONS = ("KR", "US", "JP")

# --- 取得件数 ---
MAX_RESULTS = 200  # カテゴリあたりの上限
PAGE_SIZE = 50  # API の maxResults 上限

# --- リクエスト設定 ---
PAGE_INTERVAL = 0.3  # 秒
CATEGORY_INTERVAL = 0.5
REGION_INTERVAL = 3.0
REQUEST_TIMEOUT = 15

# --- 保存 ---
DEFAULT_DATA_DIR = _PROJECT_ROOT / "data" / "youtube-trending"
RETENTION_DAYS = 30
# 日付はすべて UTC+9 で計算する
SNAPSHOT_TZ = timezone(timedelta(hours=9))

# --- ログ ---
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"


class ConfigError(Exception):
    """必須の設定が不足している."""


@dataclass(frozen=True)
class Settings:
    """1 回の実行で使う設定値."""

    api_key: str
    regions: tuple[str, ...] = DEFAULT_REGIONS
    data_dir: Path = DEFAULT_DATA_DIR
    log_dir: Path = DEFAULT_LOG_DIR


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """環境変数から Settings を組み立てる.

    Raises:
        ConfigError: YOUTUBE_API_KEY が未設定または空の場合
    """
    env = os.environ if environ is None else environ

    api_key = (env.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} 環境変数が設定されていません")

    return Settings(
        api_key=api_key,
        regions=parse_regions(env.get("YOUTUBE_REGIONS")) or DEFAULT_REGIONS,
        data_dir=Path(env["TRENDING_DATA_DIR"]) if env.get("TRENDING_DATA_DIR") else DEFAULT_DATA_DIR,
        log_dir=Path(env["TRENDING_LOG_DIR"]) if env.get("TRENDING_LOG_DIR") else DEFAULT_LOG_DIR,
    )


def parse_regions(value: str | None) -> tuple[str, ...]:
    """"KR, us,JP" のようなカンマ区切りを ("KR", "US", "JP") にする."""
    if not value:
        return ()
    return tuple(r.strip().upper() for r in value.split(",") if r.strip())
