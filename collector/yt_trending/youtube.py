"""YouTube Data API (videos.list / chart=mostPopular) の取得モジュール.

取得戦略:
  1. 1 ページ 50 件で取得し nextPageToken をたどる
  2. 上限件数に達するか、次ページがなくなったら終了
  3. 途中でエラーになった場合はそこまでの結果を返す（リトライしない）
"""

from __future__ import annotations

import logging
import time

import requests

from yt_trending.config import (
    MAX_RESULTS,
    PAGE_INTERVAL,
    PAGE_SIZE,
    REQUEST_TIMEOUT,
    VIDEOS_API_URL,
)
from yt_trending.models import Category, Video

logger = logging.getLogger(__name__)

# 取得途中で打ち切る例外（通信エラー・非 JSON・不正な item）
_FETCH_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError)


class YouTubeClient:
    """mostPopular チャートのページング取得クライアント."""

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
        page_interval: float = PAGE_INTERVAL,
    ):
        self.api_key = api_key
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.page_interval = page_interval

    def close(self) -> None:
        """自前で作った Session を閉じる（外から渡された Session は閉じない）."""
        if self._owns_session:
            self.session.close()

    def fetch_page(
        self,
        region: str,
        category: Category,
        page_size: int = PAGE_SIZE,
        page_token: str | None = None,
    ) -> dict:
        """1 ページ分のレスポンス JSON を返す.

        Raises:
            requests.RequestException: 通信エラー・HTTP エラー・非 JSON
        """
        params = {
            "part": "snippet,statistics",
            "chart": "mostPopular",
            "regionCode": region,
            "maxResults": page_size,
            "key": self.api_key,
        }
        if category.id:
            params["videoCategoryId"] = category.id
        if page_token:
            params["pageToken"] = page_token

        resp = self.session.get(VIDEOS_API_URL, params=params, timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError(f"想定外のレスポンス形式: {type(payload).__name__}")
        return payload

    def fetch_category(
        self,
        region: str,
        category: Category,
        cap: int = MAX_RESULTS,
        page_size: int = PAGE_SIZE,
    ) -> list[Video]:
        """1 地域 × 1 カテゴリの人気動画を最大 cap 件取得する.

        Returns:
            ランキング順の動画リスト。エラー時はそれまでに取得できた分（空もあり）。
        """
        logger.info("[%s] %s %s 取得中...", region, category.emoji, category.name)

        videos: list[Video] = []
        page_token = None

        while len(videos) < cap:
            try:
                payload = self.fetch_page(region, category, page_size, page_token)
                items = payload.get("items") or []
                if not items:
                    break
                page = [parse_video(item, category) for item in items]
                videos.extend(page)
            except _FETCH_ERRORS as e:
                logger.error(
                    "取得失敗: region=%s, category=%s, error=%s",
                    region, category.key, self._describe_error(e),
                )
                break

            page_token = payload.get("nextPageToken")
            if not page_token or len(videos) >= cap:
                break

            time.sleep(self.page_interval)

        result = videos[:cap]
        logger.info("  %d 件取得完了", len(result))
        return result

    def _describe_error(self, e: Exception) -> str:
        """ログ用のエラー説明. requests の例外文言はリクエスト URL（key 付き）を含むので使わない."""
        if isinstance(e, requests.RequestException):
            resp = e.response
            if resp is not None:
                return f"{type(e).__name__} (status={resp.status_code} {resp.reason})"
            return type(e).__name__
        message = f"{type(e).__name__}: {e}"
        return message.replace(self.api_key, "***") if self.api_key else message


def parse_video(item: dict, category: Category) -> Video:
    """API の item を Video に変換する.

    Raises:
        KeyError: id / snippet が欠けている場合
    """
    snippet = item["snippet"]
    stats = item.get("statistics") or {}
    return Video(
        video_id=item["id"],
        title=snippet.get("title", ""),
        channel_name=snippet.get("channelTitle", ""),
        channel_id=snippet.get("channelId", ""),
        thumbnail_url=_thumbnail_url(snippet),
        view_count=_count(stats, "viewCount"),
        like_count=_count(stats, "likeCount"),
        comment_count=_count(stats, "commentCount"),
        published_at=snippet.get("publishedAt", ""),
        category_key=category.key,
        category_name=category.name,
    )


def _thumbnail_url(snippet: dict) -> str | None:
    """high 解像度を優先し、なければ default を使う."""
    return (
        _deep_get(snippet, "thumbnails", "high", "url")
        or _deep_get(snippet, "thumbnails", "default", "url")
    )


def _count(stats: dict, key: str) -> int:
    # 非公開の統計値はキーごと欠ける
    return max(0, int(stats.get(key) or 0))


def _deep_get(d: dict, *keys: str):
    """ネストされた dict から安全に値を取得する."""
    for key in keys:
        if not isinstance(d, dict):
            return None
        d = d.get(key)
    return d
