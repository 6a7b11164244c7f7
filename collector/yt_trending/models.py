"""データモデル定義.

JSON のキーはフロントエンドに合わせて camelCase にする。
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Category:
    """収集対象カテゴリ."""

    key: str  # 例: music
    id: str | None  # videoCategoryId。None = 全カテゴリ
    name: str  # 表示名
    emoji: str


@dataclass(frozen=True)
class Video:
    """mostPopular で取得した 1 動画."""

    video_id: str
    title: str
    channel_name: str
    channel_id: str
    thumbnail_url: str | None
    view_count: int
    like_count: int
    comment_count: int
    published_at: str  # ISO 8601（API の値そのまま）
    category_key: str
    category_name: str

    def to_dict(self) -> dict:
        return {
            "videoId": self.video_id,
            "title": self.title,
            "channelName": self.channel_name,
            "channelId": self.channel_id,
            "thumbnailUrl": self.thumbnail_url,
            "viewCount": self.view_count,
            "likeCount": self.like_count,
            "commentCount": self.comment_count,
            "publishedAt": self.published_at,
            "categoryKey": self.category_key,
            "categoryName": self.category_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Video:
        return cls(
            video_id=data["videoId"],
            title=data["title"],
            channel_name=data["channelName"],
            channel_id=data["channelId"],
            thumbnail_url=data.get("thumbnailUrl"),
            view_count=int(data["viewCount"]),
            like_count=int(data["likeCount"]),
            comment_count=int(data["commentCount"]),
            published_at=data["publishedAt"],
            category_key=data["categoryKey"],
            category_name=data["categoryName"],
        )


@dataclass(frozen=True)
class GrowthVideo:
    """前日比の再生数増加量つき動画."""

    video: Video
    today_views: int | None  # None = 比較不可（初回・新規）
    yesterday_views: int | None = None

    def to_dict(self) -> dict:
        data = self.video.to_dict()
        data["todayViews"] = self.today_views
        if self.yesterday_views is not None:
            data["yesterdayViews"] = self.yesterday_views
        return data

    @classmethod
    def from_dict(cls, data: dict) -> GrowthVideo:
        today = data.get("todayViews")
        yesterday = data.get("yesterdayViews")
        return cls(
            video=Video.from_dict(data),
            today_views=None if today is None else int(today),
            yesterday_views=None if yesterday is None else int(yesterday),
        )


@dataclass
class Snapshot:
    """1 地域 1 日分の収集結果."""

    date: str  # YYYY-MM-DD
    timestamp: str  # ISO 8601 (UTC)
    region: str | None  # 単一地域モードでは None
    categories: dict[str, list[GrowthVideo]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict = {"date": self.date, "timestamp": self.timestamp}
        if self.region is not None:
            data["region"] = self.region
        data["categories"] = {
            key: [v.to_dict() for v in videos]
            for key, videos in self.categories.items()
        }
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Snapshot:
        return cls(
            date=data["date"],
            timestamp=data["timestamp"],
            region=data.get("region"),
            categories={
                key: [GrowthVideo.from_dict(v) for v in videos]
                for key, videos in (data.get("categories") or {}).items()
            },
        )


@dataclass
class CollectionSummary:
    """収集結果の件数サマリ."""

    category_counts: dict[str, int]
    unique_videos: int  # カテゴリ横断で重複を除いた動画数
