"""YouTube 人気動画収集 — メインエントリーポイント.

処理フロー:
  1. YOUTUBE_API_KEY を確認（なければ終了コード 1）
  2. データディレクトリを作成
  3. 地域ごとに全カテゴリを収集し、日付別 / latest ファイルに保存
  4. 30 日より古い日付別ファイルを削除
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from contextlib import closing
from datetime import datetime
from pathlib import Path

from yt_trending.collector import TrendingCollector
from yt_trending.config import (
    REGION_INTERVAL,
    RETENTION_DAYS,
    ConfigError,
    load_settings,
    parse_regions,
)
from yt_trending.storage import SnapshotRepository
from yt_trending.youtube import YouTubeClient

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Path) -> None:
    """ロギングの初期設定."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="YouTube 人気動画を地域・カテゴリ別に収集する")
    parser.add_argument(
        "--regions",
        help="収集する地域コード（カンマ区切り。省略時: 設定値）",
    )
    parser.add_argument(
        "--single-region",
        action="store_true",
        help="先頭の地域だけを地域プレフィックスなしで保存する（古いファイルの削除なし）",
    )
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    """メイン処理. 終了コードを返す."""
    args = _parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        return 1

    regions = parse_regions(args.regions) or settings.regions

    setup_logging(settings.log_dir)
    logger.info("=== YouTube 人気動画収集 開始 ===")
    start_time = time.time()

    try:
        repository = SnapshotRepository(settings.data_dir)
        repository.ensure_dir()
        with closing(YouTubeClient(settings.api_key)) as client:
            collector = TrendingCollector(client, repository)

            if args.single_region:
                snapshot = collector.collect(regions[0])
                repository.write(snapshot)
            else:
                _run_regions(collector, repository, regions)
    except Exception:
        logger.exception("収集失敗")
        return 1

    elapsed = time.time() - start_time
    logger.info("=== YouTube 人気動画収集 完了 ===")
    logger.info("対象地域: %s, 所要時間: %.1f 秒", ",".join(regions), elapsed)
    return 0


def _run_regions(
    collector: TrendingCollector,
    repository: SnapshotRepository,
    regions: tuple[str, ...],
) -> None:
    for i, region in enumerate(regions):
        snapshot = collector.collect_region(region)
        repository.write(snapshot)

        if i < len(regions) - 1:
            logger.info("次の地域まで待機中... (%.0f 秒)", REGION_INTERVAL)
            time.sleep(REGION_INTERVAL)

    logger.info("%d 日より古いデータを整理中...", RETENTION_DAYS)
    deleted = repository.prune_older_than(RETENTION_DAYS)
    if deleted:
        logger.info("%d 件の古いファイルを削除しました", len(deleted))
    else:
        logger.info("削除対象の古いファイルはありません")


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
