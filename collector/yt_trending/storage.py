"""スナップショットのファイル保存モジュール.

ファイル配置（地域別モード）:
  {data_dir}/{REGION}-{YYYY-MM-DD}.json  日付別
  {data_dir}/{REGION}-latest.json        最新（毎回上書き）

単一地域モードでは地域プレフィックスなしの {YYYY-MM-DD}.json / latest.json。
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime, timedelta, tzinfo
from pathlib import Path

from yt_trending.config import SNAPSHOT_TZ
from yt_trending.models import Snapshot

logger = logging.getLogger(__name__)

# 保持期間の判定対象。latest ファイルはマッチしない
_DATED_FILE_PATTERN = re.compile(r"^[A-Z]{2}-(\d{4}-\d{2}-\d{2})\.json$")


class SnapshotReadError(Exception):
    """スナップショットファイルが壊れている."""


class SnapshotRepository:
    """data_dir 配下のスナップショット JSON を読み書きする."""

    def __init__(self, data_dir: Path, tz: tzinfo = SNAPSHOT_TZ):
        self.data_dir = Path(data_dir)
        self.tz = tz

    def today(self, now: datetime | None = None) -> date:
        """リポジトリのタイムゾーンでの今日の日付."""
        now = now or datetime.now(self.tz)
        return now.astimezone(self.tz).date()

    def path_for(self, region: str | None, day: date | str) -> Path:
        day_str = day if isinstance(day, str) else day.isoformat()
        name = f"{region}-{day_str}.json" if region else f"{day_str}.json"
        return self.data_dir / name

    def latest_path(self, region: str | None) -> Path:
        return self.data_dir / (f"{region}-latest.json" if region else "latest.json")

    def ensure_dir(self) -> None:
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info("データディレクトリ作成: %s", self.data_dir)

    def read(self, region: str | None, day: date | str) -> Snapshot | None:
        """指定日のスナップショットを読む.

        Returns:
            Snapshot。ファイルがなければ None。

        Raises:
            SnapshotReadError: JSON またはスナップショット形式が不正な場合
        """
        path = self.path_for(region, day)
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return Snapshot.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotReadError(f"スナップショット読み込み失敗: {path}: {e}") from e

    def read_yesterday(self, region: str | None, now: datetime | None = None) -> Snapshot | None:
        """前日のスナップショットを読む（比較用）."""
        yesterday = self.today(now) - timedelta(days=1)
        snapshot = self.read(region, yesterday)
        label = region or "-"
        if snapshot is None:
            logger.info("[%s] 前日データなし（初回実行）: %s", label, yesterday)
        else:
            logger.info("[%s] 前日データ読み込み: %s", label, yesterday)
        return snapshot

    def write(self, snapshot: Snapshot) -> tuple[Path, Path]:
        """日付別ファイル → latest の順に書き込む.

        Returns:
            (日付別ファイル, latest ファイル) のパス
        """
        body = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)

        dated = self.path_for(snapshot.region, snapshot.date)
        _write_atomic(dated, body)
        logger.info("保存完了: %s", dated)

        latest = self.latest_path(snapshot.region)
        _write_atomic(latest, body)
        logger.info("最新データ更新: %s", latest)
        return dated, latest

    def prune_older_than(self, max_age_days: int, now: datetime | None = None) -> list[str]:
        """max_age_days より古い日付別ファイルを削除する.

        Returns:
            削除したファイル名のリスト
        """
        cutoff = self.today(now) - timedelta(days=max_age_days)
        deleted: list[str] = []

        for path in sorted(self.data_dir.iterdir()):
            m = _DATED_FILE_PATTERN.match(path.name)
            if not m:
                continue
            try:
                file_date = date.fromisoformat(m.group(1))
            except ValueError:
                logger.warning("日付として解釈できないファイル名: %s", path.name)
                continue
            if file_date >= cutoff:
                continue

            try:
                path.unlink()
            except OSError as e:
                logger.error("削除失敗: %s, error=%s", path.name, e)
                continue
            logger.info("  削除: %s", path.name)
            deleted.append(path.name)

        return deleted


def _write_atomic(path: Path, body: str) -> None:
    """一時ファイルに書いてから置き換える（途中失敗で既存ファイルを壊さない）."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(body)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    tmp.replace(path)
