"""地域 × カテゴリ単位の収集処理.

処理フロー（1 地域分）:
  1. 前日スナップショットを読む
  2. カテゴリ順に取得 → 前日比計算 → 格納 → 待機
  3. カテゴリ別件数と重複除外後の動画数をログに出す
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import datetime, timezone

from yt_trending.config import CATEGORIES, CATEGORY_INTERVAL, MAX_RESULTS, PAGE_SIZE
from yt_trending.growth import calculate_growth
from yt_trending.models import Category, CollectionSummary, Snapshot
from yt_trending.storage import SnapshotRepository
from yt_trending.youtube import YouTubeClient

logger = logging.getLogger(__name__)


class TrendingCollector:
    """YouTubeClient と SnapshotRepository を使って 1 地域分を集める."""

    def __init__(
        self,
        client: YouTubeClient,
        repository: SnapshotRepository,
        categories: Mapping[str, Category] = CATEGORIES,
        category_interval: float = CATEGORY_INTERVAL,
        max_results: int = MAX_RESULTS,
        page_size: int = PAGE_SIZE,
    ):
        self.client = client
        self.repository = repository
        self.categories = categories
        self.category_interval = category_interval
        self.max_results = max_results
        self.page_size = page_size

    def collect_region(self, region: str, now: datetime | None = None) -> Snapshot:
        """地域別モード: {REGION}-{date}.json 用のスナップショットを作る."""
        return self._collect(region, key_region=region, now=now)

    def collect(self, region: str, now: datetime | None = None) -> Snapshot:
        """単一地域モード: 地域プレフィックスなしのスナップショットを作る."""
        return self._collect(region, key_region=None, now=now)

    def _collect(self, region: str, key_region: str | None, now: datetime | None) -> Snapshot:
        logger.info("[%s] 地域データ収集 開始", region)

        captured_at = now or datetime.now(timezone.utc)
        yesterday = self.repository.read_yesterday(key_region, now=captured_at)

        snapshot = Snapshot(
            date=self.repository.today(captured_at).isoformat(),
            timestamp=captured_at.astimezone(timezone.utc).isoformat(),
            region=key_region,
        )

        for key, category in self.categories.items():
            videos = self.client.fetch_category(
                region, category, cap=self.max_results, page_size=self.page_size
            )
            snapshot.categories[key] = calculate_growth(videos, yesterday)
            # API クォータ保護のため最後のカテゴリの後も待つ
            time.sleep(self.category_interval)

        summary = summarize(snapshot)
        logger.info("[%s] 収集結果:", region)
        for key, count in summary.category_counts.items():
            category = self.categories[key]
            logger.info("  %s %s: %d 件", category.emoji, category.name, count)
        logger.info("  総ユニーク動画: %d 件", summary.unique_videos)

        return snapshot


def summarize(snapshot: Snapshot) -> CollectionSummary:
    """カテゴリ別件数と、カテゴリ横断の重複を除いた動画数を数える."""
    counts = {key: len(videos) for key, videos in snapshot.categories.items()}
    unique_ids = {
        gv.video.video_id
        for videos in snapshot.categories.values()
        for gv in videos
    }
    return CollectionSummary(category_counts=counts, unique_videos=len(unique_ids))
