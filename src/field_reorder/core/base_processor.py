"""
Base processor interface for file processing operations
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from field_reorder.core.config import Config

logger = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of processing operation"""

    SUCCESS = "success"
    ERROR = "error"
    NO_CHANGES = "no_changes"


@dataclass
class ProcessResult:
    """Result of a processing operation"""

    file_path: Path
    status: ProcessingStatus
    changes_applied: int = 0
    changes_details: list[dict[str, Any]] = field(default_factory=list)
    error_message: str | None = None
    backup_path: Path | None = None
    preview: str | None = None  # Unified diff for dry runs

    @property
    def is_success(self) -> bool:
        """Check if processing was successful"""
        return self.status in [ProcessingStatus.SUCCESS, ProcessingStatus.NO_CHANGES]

    def __str__(self) -> str:
        """String representation"""
        if self.status == ProcessingStatus.SUCCESS:
            return f"✓ {self.file_path.name}: {self.changes_applied} changes applied"
        elif self.status == ProcessingStatus.NO_CHANGES:
            return f"= {self.file_path.name}: No changes needed"
        else:
            return f"✗ {self.file_path.name}: {self.error_message}"


class BaseProcessor(ABC):
    """Abstract base class for all file processors"""

    def __init__(
        self,
        config: Config | None = None,
    ):
        """
        Initialize processor

        Args:
            config: Configuration, defaults when omitted
        """
        self.config = config or Config()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def encoding(self) -> str:
        return self.config.reorder.encoding

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """
        Check if this processor can handle the given file

        Args:
            file_path: Path to file

        Returns:
            True if processor can handle this file type
        """
        pass

    @abstractmethod
    def process_file(
        self,
        file_path: Path,
        **kwargs,
    ) -> ProcessResult:
        """
        Process a single file

        Args:
            file_path: Path to file to process
            **kwargs: Additional processing parameters

        Returns:
            ProcessResult with operation details
        """
        pass

    @abstractmethod
    def validate_file(
        self,
        file_path: Path,
    ) -> bool:
        """
        Validate file syntax/structure after processing

        Args:
            file_path: Path to file to validate

        Returns:
            True if file is valid
        """
        pass

    def read_file(
        self,
        file_path: Path,
    ) -> str:
        """
        Read file content

        Args:
            file_path: Path to file

        Returns:
            File content as string
        """
        try:
            # newline="" keeps offsets aligned with the bytes on disk
            with open(file_path, "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading {file_path}: {e}")
            raise

    def write_file(
        self,
        file_path: Path,
        content: str,
    ) -> bool:
        """
        Write content to file

        Args:
            file_path: Path to file
            content: Content to write

        Returns:
            True if successful
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
            return True
        except (OSError, UnicodeEncodeError) as e:
            self.logger.error(f"Error writing {file_path}: {e}")
            return False

    def collect_files(
        self,
        path: Path,
        recursive: bool = False,
    ) -> list[Path]:
        """
        Collect processable files under a path

        Args:
            path: File or directory
            recursive: Descend into subdirectories

        Returns:
            Sorted list of files this processor can handle
        """
        if path.is_file():
            return [path]
        candidates = path.rglob("*") if recursive else path.glob("*")
        return sorted(
            candidate
            for candidate in candidates
            if candidate.is_file() and self.can_process(candidate)
        )

