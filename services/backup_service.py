"""
Backup Service - full binary copies of a SQLite store.

Backups are written with SQLite's online backup API so they are consistent
while the application keeps running. Files are named
leasehub_backup_<YYYYmmdd_HHMMSS>_v<schema version>.db and, when Azure
credentials are configured, mirrored to a blob container.
"""
import logging
import os
import re
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from azure.core.exceptions import AzureError
from sqlalchemy.engine import Engine

import azure_blob
import config
from services.exceptions import NotFoundError, StorageUnavailableError, ValidationFailure

logger = logging.getLogger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"
BACKUP_PREFIX = "leasehub_backup_"
BACKUP_NAME_PATTERN = re.compile(r"^leasehub_backup_\d{8}_\d{6}(_\d+)?_v\d+\.db$")


@dataclass
class BackupInfo:
     name: str
     size: int
     date: datetime


class BackupService:
     """Create, list, restore and delete backups of the engine's SQLite database."""

     def __init__(self, engine: Engine, backup_dir: str = None, mirror: Optional[bool] = None):
          if engine.dialect.name != "sqlite":
               raise ValidationFailure(
                    f"Backups are only supported for SQLite stores, not {engine.dialect.name}",
                    "BACKUP_UNSUPPORTED"
               )
          self.engine = engine
          self.backup_dir = backup_dir or config.BACKUP_DIR
          self.mirror = azure_blob.is_configured() if mirror is None else mirror

     def _path(self, name: str) -> str:
          if not BACKUP_NAME_PATTERN.match(name):
               raise ValidationFailure(f"'{name}' is not a backup file name", "INVALID_BACKUP_NAME")
          return os.path.join(self.backup_dir, name)

     def _new_name(self, now: datetime) -> str:
          stamp = now.strftime("%Y%m%d_%H%M%S")
          name = f"{BACKUP_PREFIX}{stamp}_v{config.SCHEMA_VERSION}.db"
          counter = 1
          while os.path.exists(os.path.join(self.backup_dir, name)):
               name = f"{BACKUP_PREFIX}{stamp}_{counter}_v{config.SCHEMA_VERSION}.db"
               counter += 1
          return name

     def _info(self, name: str) -> BackupInfo:
          stat = os.stat(os.path.join(self.backup_dir, name))
          return BackupInfo(name=name, size=stat.st_size, date=datetime.fromtimestamp(stat.st_mtime))

     def create_backup(self, now: Optional[datetime] = None) -> BackupInfo:
          os.makedirs(self.backup_dir, exist_ok=True)
          name = self._new_name(now or datetime.now())
          path = os.path.join(self.backup_dir, name)

          raw = self.engine.raw_connection()
          try:
               target = sqlite3.connect(path)
               try:
                    raw.driver_connection.backup(target)
               finally:
                    target.close()
          except sqlite3.Error as exc:
               logger.error("Backup to %s failed: %s", path, exc)
               raise StorageUnavailableError(f"Backup failed: {exc}") from exc
          finally:
               raw.close()

          if self.mirror:
               try:
                    azure_blob.upload_backup(path)
               except AzureError as exc:
                    logger.error("Could not mirror backup %s to Azure: %s", name, exc)

          logger.info("Created backup %s", name)
          return self._info(name)

     def list_backups(self) -> List[BackupInfo]:
          """Backups in the backup directory, newest first."""
          if not os.path.isdir(self.backup_dir):
               return []
          backups = [
               self._info(name)
               for name in os.listdir(self.backup_dir)
               if BACKUP_NAME_PATTERN.match(name)
          ]
          return sorted(backups, key=lambda b: (b.date, b.name), reverse=True)

     def delete_backup(self, name: str) -> None:
          path = self._path(name)
          if not os.path.exists(path):
               raise NotFoundError(f"Backup {name} not found")
          os.remove(path)

          if self.mirror:
               try:
                    azure_blob.delete_backup(name)
               except AzureError as exc:
                    logger.error("Could not delete mirrored backup %s: %s", name, exc)

          logger.info("Deleted backup %s", name)

     def restore_backup(self, data: bytes) -> bool:
          """
          Replace the live database with the contents of a backup blob.

          Returns:
               True when the store was restored, False when the blob is not a
               SQLite database
          """
          if not data.startswith(SQLITE_HEADER):
               logger.warning("Restore refused: blob is not a SQLite database")
               return False

          fd, tmp_path = tempfile.mkstemp(suffix=".db")
          try:
               with os.fdopen(fd, "wb") as handle:
                    handle.write(data)

               source = sqlite3.connect(tmp_path)
               raw = self.engine.raw_connection()
               try:
                    source.execute("PRAGMA schema_version").fetchone()
                    source.backup(raw.driver_connection)
               except sqlite3.DatabaseError as exc:
                    logger.warning("Restore refused: %s", exc)
                    return False
               finally:
                    raw.close()
                    source.close()
          finally:
               os.remove(tmp_path)

          logger.info("Restored database from a %d byte backup", len(data))
          return True

     def restore_from_file(self, name: str) -> bool:
          path = self._path(name)
          if not os.path.exists(path):
               raise NotFoundError(f"Backup {name} not found")
          with open(path, "rb") as handle:
               return self.restore_backup(handle.read())
