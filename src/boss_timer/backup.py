"""Rotating snapshots of the data file, and restore-on-startup."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)

MAX_BACKUPS = 2
_EMPTY_DOCUMENTS = ("", "{}")


class BackupManager:
    """Creates and prunes ``<prefix>_backup_<timestamp>.json`` copies of the data file.

    Never writes to the data file except in ``restore_latest_backup``, which
    runs once at startup before anything loads it.
    """

    def __init__(
        self,
        data_file: Path,
        backup_dir: Path,
        *,
        max_backups: int = MAX_BACKUPS,
        prefix: str | None = None,
    ) -> None:
        if max_backups < 1:
            raise ValueError("max_backups must be at least 1")
        self.data_file = data_file
        self.backup_dir = backup_dir
        self.max_backups = max_backups
        self.prefix = prefix or data_file.stem
        self.ready = False

    @property
    def pattern(self) -> str:
        return f"{self.prefix}_backup_*.json"

    def list_snapshots(self) -> list[Path]:
        """Newest first, by modification time (then name, which embeds the timestamp)."""
        if not self.backup_dir.is_dir():
            return []
        stamped: list[tuple[int, str, Path]] = []
        for path in self.backup_dir.glob(self.pattern):
            try:
                stamped.append((path.stat().st_mtime_ns, path.name, path))
            except OSError:
                continue  # deleted between glob and stat
        stamped.sort(reverse=True)
        return [path for _, _, path in stamped]

    def _snapshot_path(self) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        target = self.backup_dir / f"{self.prefix}_backup_{stamp}.json"
        counter = 1
        while target.exists():
            target = self.backup_dir / f"{self.prefix}_backup_{stamp}_{counter:03d}.json"
            counter += 1
        return target

    def create_backup(self) -> Path | None:
        """Copy the data file to a new snapshot, then prune beyond ``max_backups``.

        A missing data file is created as ``{}`` first. Returns the snapshot
        path, or None if the copy itself failed.
        """
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            if not self.data_file.exists():
                log.warning("[BACKUP] %s missing, creating an empty one", self.data_file)
                self.data_file.parent.mkdir(parents=True, exist_ok=True)
                self.data_file.write_text("{}", encoding="utf-8")
            target = self._snapshot_path()
            shutil.copyfile(self.data_file, target)
        except OSError:
            log.exception("[BACKUP] Could not create a snapshot of %s", self.data_file)
            return None

        log.info("[BACKUP] Created %s", target.name)
        self._prune()
        return target

    def _prune(self) -> None:
        for old in self.list_snapshots()[self.max_backups :]:
            try:
                old.unlink()
                log.info("[BACKUP] Removed old snapshot %s", old.name)
            except OSError as e:
                log.warning("[BACKUP] Could not remove %s: %s", old.name, e)

    def _live_has_data(self) -> bool:
        if not self.data_file.exists():
            return False
        content = self.data_file.read_bytes().decode("utf-8", errors="replace")
        return "".join(content.split()) not in _EMPTY_DOCUMENTS

    def restore_latest_backup(self) -> bool:
        """Copy the newest snapshot over the data file if the data file is absent or empty.

        Existing data always wins. Only the first call does anything.
        """
        if self.ready:
            log.warning("[RESTORE] Already initialised, ignoring repeated restore")
            return False
        self.ready = True
        try:
            if self._live_has_data():
                log.info("[RESTORE] %s has data, skipping restore", self.data_file)
                return False

            snapshots = self.list_snapshots()
            if not snapshots:
                log.info("[RESTORE] No snapshots available in %s", self.backup_dir)
                return False

            latest = snapshots[0]
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(latest, self.data_file)
        except OSError:
            log.exception("[RESTORE] Restore into %s failed", self.data_file)
            return False

        log.info("[RESTORE] Restored %s from %s", self.data_file, latest.name)
        return True
