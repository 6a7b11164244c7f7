"""collector モジュールのテスト."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, call, patch

from yt_trending.collector import TrendingCollector, summarize
from yt_trending.config import CATEGORIES
from yt_trending.models import GrowthVideo, Snapshot, Video
from yt_trending.storage import SnapshotRepository

NOW = datetime(2026, 10, 16, 15, 0, tzinfo=timezone.utc)


def _video(video_id: str, views: int = 100, category_key: str = "all") -> Video:
    return Video(
        video_id=video_id,
        title=video_id,
        channel_name="ch",
        channel_id="UC1",
        thumbnail_url=None,
        view_count=views,
        like_count=0,
        comment_count=0,
        published_at="2026-10-15T00:00:00Z",
        category_key=category_key,
        category_name=category_key,
    )


def _growth(*ids: str) -> list[GrowthVideo]:
    return [GrowthVideo(video=_video(i), today_views=None) for i in ids]


class TestCollectRegion:
    """collect_region のテスト."""

    @patch("yt_trending.collector.time.sleep")
    def test_first_run_all_none(self, mock_sleep, tmp_path):
        """前日データがない初回は全カテゴリの today_views が None であること."""
        client = MagicMock()
        client.fetch_category.side_effect = lambda region, cat, **kw: [
            _video(f"{cat.key}-1", category_key=cat.key),
            _video(f"{cat.key}-2", category_key=cat.key),
        ]
        collector = TrendingCollector(client, SnapshotRepository(tmp_path))

        snapshot = collector.collect_region("KR", now=NOW)

        assert list(snapshot.categories) == list(CATEGORIES)
        assert all(
            gv.today_views is None
            for videos in snapshot.categories.values()
            for gv in videos
        )
        assert snapshot.region == "KR"
        assert snapshot.date == "2026-10-17"
        assert snapshot.timestamp == "2026-10-16T15:00:00+00:00"

    @patch("yt_trending.collector.time.sleep")
    def test_sleeps_after_every_category(self, mock_sleep, tmp_path):
        """最後のカテゴリの後も含めカテゴリ数だけ待機すること."""
        client = MagicMock()
        client.fetch_category.return_value = []
        collector = TrendingCollector(client, SnapshotRepository(tmp_path))

        collector.collect_region("US", now=NOW)

        assert mock_sleep.call_args_list == [call(0.5)] * len(CATEGORIES)

    @patch("yt_trending.collector.time.sleep")
    def test_fetch_order_and_args(self, mock_sleep, tmp_path):
        client = MagicMock()
        client.fetch_category.return_value = []
        collector = TrendingCollector(client, SnapshotRepository(tmp_path))

        collector.collect_region("JP", now=NOW)

        assert client.fetch_category.call_args_list == [
            call("JP", c, cap=200, page_size=50) for c in CATEGORIES.values()
        ]

    @patch("yt_trending.collector.time.sleep")
    def test_empty_category_does_not_abort(self, mock_sleep, tmp_path):
        """空のカテゴリがあっても後続カテゴリの収集を続けること."""
        categories = {k: CATEGORIES[k] for k in ("all", "music", "news")}
        client = MagicMock()
        client.fetch_category.side_effect = [[_video("a")], [], [_video("n")]]
        collector = TrendingCollector(client, SnapshotRepository(tmp_path), categories=categories)

        snapshot = collector.collect_region("KR", now=NOW)

        assert [len(v) for v in snapshot.categories.values()] == [1, 0, 1]

    @patch("yt_trending.collector.time.sleep")
    def test_uses_yesterday_snapshot(self, mock_sleep, tmp_path):
        """前日スナップショットとの差分が計算されること."""
        repo = SnapshotRepository(tmp_path)
        repo.write(Snapshot(
            date="2026-10-16",
            timestamp="2026-10-15T15:00:00+00:00",
            region="KR",
            categories={"all": [GrowthVideo(video=_video("a", 100), today_views=None)]},
        ))
        categories = {"all": CATEGORIES["all"]}
        client = MagicMock()
        client.fetch_category.return_value = [_video("a", 180), _video("b", 50)]
        collector = TrendingCollector(client, repo, categories=categories)

        snapshot = collector.collect_region("KR", now=NOW)

        a, b = snapshot.categories["all"]
        assert (a.today_views, a.yesterday_views) == (80, 100)
        assert b.today_views is None

    @patch("yt_trending.collector.time.sleep")
    def test_reads_yesterday_once(self, mock_sleep):
        repo = MagicMock()
        repo.read_yesterday.return_value = None
        repo.today.return_value.isoformat.return_value = "2026-10-17"
        client = MagicMock()
        client.fetch_category.return_value = []
        collector = TrendingCollector(client, repo)

        collector.collect_region("KR", now=NOW)

        repo.read_yesterday.assert_called_once_with("KR", now=NOW)


class TestCollect:
    """単一地域モード collect のテスト."""

    @patch("yt_trending.collector.time.sleep")
    def test_snapshot_has_no_region(self, mock_sleep, tmp_path):
        repo = SnapshotRepository(tmp_path)
        client = MagicMock()
        client.fetch_category.return_value = [_video("a")]
        collector = TrendingCollector(client, repo, categories={"all": CATEGORIES["all"]})

        snapshot = collector.collect("KR", now=NOW)
        dated, latest = repo.write(snapshot)

        assert snapshot.region is None
        assert client.fetch_category.call_args.args[0] == "KR"
        assert (dated.name, latest.name) == ("2026-10-17.json", "latest.json")


class TestSummarize:
    """summarize のテスト."""

    def test_unique_count_across_categories(self):
        """2 カテゴリに同じ動画があればユニーク数では 1 回だけ数えること."""
        snapshot = Snapshot(
            date="2026-10-17",
            timestamp="2026-10-16T15:00:00+00:00",
            region="KR",
            categories={"all": _growth("shared", "x"), "music": _growth("shared")},
        )

        summary = summarize(snapshot)

        assert summary.category_counts == {"all": 2, "music": 1}
        assert summary.unique_videos == 2

    def test_empty_snapshot(self):
        summary = summarize(Snapshot(date="2026-10-17", timestamp="", region="KR"))

        assert summary.category_counts == {}
        assert summary.unique_videos == 0
