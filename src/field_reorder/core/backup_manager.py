"""
Backup sessions for files rewritten by assists
"""

import json
import logging
import shutil
import tarfile
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

METADATA_FILE = "session_metadata.json"
SESSION_PREFIX = "session_"


@dataclass
class BackupSession:
    """Information about a backup session"""

    session_id: str
    timestamp: str
    directory: Path
    files_backed_up: list[str] = field(default_factory=list)
    edits: list[dict[str, Any]] = field(default_factory=list)
    total_size: int = 0
    compressed: bool = False


def _relative_backup_path(file_path: Path) -> Path:
    """Mirror absolute paths below the session directory"""
    if file_path.is_absolute():
        return Path(*file_path.parts[1:])
    return file_path


class BackupManager:
    """Keeps copies of source files before assists rewrite them"""

    def __init__(
        self,
        backup_dir: str = ".backups",
        compression: bool = False,
        keep_sessions: int = 10,
    ):
        """
        Initialize backup manager

        Args:
            backup_dir: Directory to store backups
            compression: Whether to compress finalized sessions
            keep_sessions: Number of backup sessions to keep
        """
        self.backup_dir = Path(backup_dir)
        self.compression = compression
        self.keep_sessions = keep_sessions
        self.current_session: BackupSession | None = None
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def start_session(self, description: str | None = None) -> Path:
        """Start a new backup session"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        session_id = f"{SESSION_PREFIX}{timestamp}"
        if description:
            session_id = f"{session_id}_{description}"
        session_dir = self.backup_dir / session_id
        session_dir.mkdir(parents=True, exist_ok=True)
        self.current_session = BackupSession(
            session_id=session_id, timestamp=timestamp, directory=session_dir
        )
        logger.info(f"Started backup session: {session_id}")
        return session_dir

    def backup_file(self, file_path: Path) -> Path | None:
        """Backup a single file into the current session"""
        if not self.current_session:
            self.start_session()

        if not file_path.exists():
            logger.warning(f"File does not exist: {file_path}")
            return None

        try:
            backup_path = self.current_session.directory / _relative_backup_path(
                file_path
            )
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)

            self.current_session.files_backed_up.append(str(file_path))
            self.current_session.total_size += file_path.stat().st_size

            logger.debug(f"Backed up: {file_path} -> {backup_path}")
            return backup_path

        except OSError as e:
            logger.error(f"Error backing up {file_path}: {e}")
            return None

    def record_edit(
        self,
        file_path: Path,
        assist_id: str,
        replacements: list[dict[str, Any]],
    ) -> None:
        """Remember which assist rewrote a file and how"""
        if not self.current_session:
            self.start_session()
        self.current_session.edits.append(
            {
                "file": str(file_path),
                "assist": assist_id,
                "replacements": replacements,
            }
        )

    def discard_session(self) -> None:
        """Drop the current session and its directory"""
        if not self.current_session:
            return
        session = self.current_session
        self.current_session = None
        shutil.rmtree(session.directory, ignore_errors=True)
        logger.debug(f"Discarded backup session: {session.session_id}")

    def restore_file(
        self, original_path: Path, backup_path: Path | None = None
    ) -> bool:
        """Restore a file from backup"""
        try:
            if backup_path and backup_path.exists():
                shutil.copy2(backup_path, original_path)
                logger.info(f"Restored {original_path} from {backup_path}")
                return True

            if self.current_session:
                session_backup = self.current_session.directory / (
                    _relative_backup_path(original_path)
                )
                if session_backup.exists():
                    shutil.copy2(session_backup, original_path)
                    logger.info(f"Restored {original_path} from current session")
                    return True

            logger.warning(f"No backup found for {original_path}")
            return False

        except OSError as e:
            logger.error(f"Error restoring {original_path}: {e}")
            return False

    def finalize_session(self) -> Path | None:
        """Write session metadata, compress if configured and prune old sessions"""
        if not self.current_session:
            logger.warning("No active backup session")
            return None

        session = self.current_session
        if not session.files_backed_up:
            # Nothing was changed, keep older sessions from being pruned
            self.discard_session()
            return None

        try:
            metadata_file = session.directory / METADATA_FILE
            with open(metadata_file, "w", encoding="utf-8") as f:
                json.dump(asdict(session), f, indent=2, default=str)

            result = session.directory
            if self.compression:
                archive_path = self._compress_session()
                if archive_path:
                    shutil.rmtree(session.directory)
                    session.compressed = True
                    logger.info(f"Compressed backup session to {archive_path}")
                    result = archive_path

            self._cleanup_old_sessions()

            logger.info(f"Finalized backup session: {session.session_id}")
            return result

        except OSError as e:
            logger.error(f"Error finalizing backup session: {e}")
            return None
        finally:
            self.current_session = None

    def _compress_session(self) -> Path | None:
        """Compress current session directory"""
        if not self.current_session:
            return None

        try:
            archive_path = self.backup_dir / f"{self.current_session.session_id}.tar.gz"
            with tarfile.open(archive_path, "w:gz") as tar:
                tar.add(
                    self.current_session.directory,
                    arcname=self.current_session.session_id,
                )
            return archive_path
        except (OSError, tarfile.TarError) as e:
            logger.error(f"Error compressing session: {e}")
            return None

    def _session_entries(self) -> list[Path]:
        """Session directories and archives in the backup directory"""
        entries = []
        for item in self.backup_dir.iterdir():
            if not item.name.startswith(SESSION_PREFIX):
                continue
            if item.is_dir() or item.name.endswith(".tar.gz"):
                entries.append(item)
        return entries

    def _cleanup_old_sessions(self) -> None:
        """Remove old backup sessions beyond keep_sessions limit"""
        # Session ids embed their timestamp, so name order is age order
        sessions = sorted(self._session_entries(), key=lambda x: x.name, reverse=True)
        for session in sessions[self.keep_sessions :]:
            self._remove_entry(session)
            logger.debug(f"Removed old backup: {session}")

    def _remove_entry(self, entry: Path) -> None:
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()

    def clean_sessions(self) -> int:
        """
        Remove every backup session

        Returns:
            Number of sessions removed
        """
        entries = self._session_entries()
        for entry in entries:
            self._remove_entry(entry)
        logger.info(f"Removed {len(entries)} backup sessions")
        return len(entries)

    def list_sessions(self) -> list[dict[str, Any]]:
        """List all backup sessions, newest first"""
        sessions = []

        for item in self._session_entries():
            if item.is_dir():
                metadata_file = item / METADATA_FILE
                if metadata_file.exists():
                    with open(metadata_file, "r", encoding="utf-8") as f:
                        sessions.append(json.load(f))
                else:
                    sessions.append(
                        {
                            "session_id": item.name,
                            "directory": str(item),
                            "timestamp": item.name[len(SESSION_PREFIX) :],
                        }
                    )
            else:
                session_id = item.name[: -len(".tar.gz")]
                sessions.append(
                    {
                        "session_id": session_id,
                        "archive": str(item),
                        "compressed": True,
                        "timestamp": session_id[len(SESSION_PREFIX) :],
                    }
                )

        return sorted(sessions, key=lambda x: x.get("session_id", ""), reverse=True)

    def restore_session(self, session_id: str) -> bool:
        """Restore all files from a backup session"""
        session_path = self.backup_dir / session_id
        archive_path = self.backup_dir / f"{session_id}.tar.gz"
        extracted = False

        try:
            if archive_path.exists() and not session_path.exists():
                with tarfile.open(archive_path, "r:gz") as tar:
                    tar.extractall(self.backup_dir, filter="data")
                extracted = True

            if not session_path.exists():
                logger.error(f"Backup session not found: {session_id}")
                return False

            metadata_file = session_path / METADATA_FILE
            if not metadata_file.exists():
                logger.error(f"Backup session has no metadata: {session_id}")
                return False

            with open(metadata_file, "r", encoding="utf-8") as f:
                metadata = json.load(f)

            for file_path in metadata.get("files_backed_up", []):
                original = Path(file_path)
                backup = session_path / _relative_backup_path(original)
                if backup.exists():
                    original.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(backup, original)
                    logger.info(f"Restored: {original}")
                else:
                    logger.warning(f"Missing backup copy for {original}")

            return True

        except (OSError, ValueError, tarfile.TarError) as e:
            logger.error(f"Error restoring session {session_id}: {e}")
            return False
        finally:
            if extracted and session_path.exists():
                shutil.rmtree(session_path)
