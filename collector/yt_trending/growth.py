"""前日比の再生数増加量を計算するモジュール."""

from __future__ import annotations

from collections.abc import Iterable

from yt_trending.models import GrowthVideo, Snapshot, Video


def build_baseline(yesterday: Snapshot) -> dict[str, int]:
    """前日スナップショットを video_id -> 再生数 にまとめる.

    複数カテゴリに同じ動画がある場合は後のカテゴリの値を使う。
    """
    baseline: dict[str, int] = {}
    for videos in yesterday.categories.values():
        for gv in videos:
            baseline[gv.video.video_id] = gv.video.view_count
    return baseline


def calculate_growth(
    videos: Iterable[Video], yesterday: Snapshot | None
) -> list[GrowthVideo]:
    """今日の動画リストに前日比を付与する.

    Args:
        videos: 今日取得した動画（ランキング順）
        yesterday: 前日スナップショット。None なら初回実行扱い

    Returns:
        入力と同じ順の GrowthVideo リスト。前日に存在しない動画の
        today_views は None（0 とは区別する）。
    """
    if yesterday is None:
        return [GrowthVideo(video=v, today_views=None) for v in videos]

    baseline = build_baseline(yesterday)
    results: list[GrowthVideo] = []
    for v in videos:
        prev = baseline.get(v.video_id)
        if prev is None:
            results.append(GrowthVideo(video=v, today_views=None))
        else:
            # 再生数の下方修正で負になることがある
            results.append(GrowthVideo(
                video=v,
                today_views=max(0, v.view_count - prev),
                yesterday_views=prev,
            ))
    return results
