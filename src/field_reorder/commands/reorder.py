"""
Reorder command - apply the reorder fields assist to files on disk
"""

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path

from field_reorder.assists.assist_ctx import Assist, AssistContext
from field_reorder.assists.reorder_fields import (
    RECORD_LIT,
    RECORD_PAT,
    plan_reorder,
    reorder_fields,
)
from field_reorder.core.backup_manager import BackupManager
from field_reorder.core.base_processor import (
    BaseProcessor,
    ProcessingStatus,
    ProcessResult,
)
from field_reorder.core.config import Config
from field_reorder.core.semantics import Semantics
from field_reorder.core.syntax import SourceFile, SourceParseError, parse_source

logger = logging.getLogger(__name__)


@dataclass
class ReorderFinding:
    """A construct whose fields are out of declaration order"""

    file_path: Path
    line: int
    column: int
    construct: str
    current_order: list[str]
    expected_order: list[str]

    def __str__(self) -> str:
        current = ", ".join(self.current_order)
        expected = ", ".join(self.expected_order)
        return (
            f"{self.file_path}:{self.line}:{self.column}: "
            f"{self.construct} {{{current}}} -> {{{expected}}}"
        )


class ReorderCommand(BaseProcessor):
    """Reorder struct literal and pattern fields in source files"""

    def __init__(
        self,
        config: Config | None = None,
        backup_manager: BackupManager | None = None,
    ):
        super().__init__(config)
        self.backup_manager = backup_manager

    def can_process(self, file_path: Path) -> bool:
        return file_path.suffix in self.config.reorder.file_extensions

    def validate_file(self, file_path: Path) -> bool:
        """Check that the file still parses"""
        try:
            parse_source(self.read_file(file_path))
            return True
        except (OSError, UnicodeDecodeError, SourceParseError) as e:
            self.logger.error(f"Validation failed for {file_path}: {e}")
            return False

    def process_file(
        self,
        file_path: Path,
        offset: int | None = None,
        line: int | None = None,
        column: int | None = None,
        **kwargs,
    ) -> ProcessResult:
        """
        Apply the assist at a cursor position of a file

        The cursor is given either as a character offset or as a 1-based
        line and column.

        Args:
            file_path: File to rewrite
            offset: Cursor offset
            line: Cursor line
            column: Cursor column

        Returns:
            ProcessResult; NO_CHANGES when the assist does not apply
        """
        try:
            text = self.read_file(file_path)
            source = parse_source(text)
            if offset is None and line is not None and column is not None:
                offset = source.offset_at(line, column)
        except (OSError, UnicodeDecodeError, SourceParseError, ValueError) as e:
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=str(e),
            )

        assist = reorder_fields(AssistContext(source, offset))
        if assist is None:
            self.logger.info(f"No fields to reorder at offset {offset} in {file_path}")
            return ProcessResult(file_path=file_path, status=ProcessingStatus.NO_CHANGES)

        new_text = assist.apply(text)
        details = self._edit_details(source, assist)

        if self.config.dry_run:
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.SUCCESS,
                changes_applied=len(assist.edit),
                changes_details=details,
                preview=self.preview(file_path, text, new_text),
            )

        backup_path = None
        if self.backup_manager and self.config.backup.enabled:
            backup_path = self.backup_manager.backup_file(file_path)
            self.backup_manager.record_edit(file_path, assist.id.id, details)

        if not self.write_file(file_path, new_text):
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message="Could not write file",
                backup_path=backup_path,
            )

        if not self.validate_file(file_path):
            self.write_file(file_path, text)
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message="Reordered source no longer parses, original restored",
                backup_path=backup_path,
            )

        self.logger.info(f"{assist.label}: {file_path} ({len(assist.edit)} edits)")
        return ProcessResult(
            file_path=file_path,
            status=ProcessingStatus.SUCCESS,
            changes_applied=len(assist.edit),
            changes_details=details,
            backup_path=backup_path,
        )

    def preview(self, file_path: Path, old_text: str, new_text: str) -> str:
        """Unified diff between the current and the reordered text"""
        return "".join(
            difflib.unified_diff(
                old_text.splitlines(keepends=True),
                new_text.splitlines(keepends=True),
                fromfile=f"a/{file_path.name}",
                tofile=f"b/{file_path.name}",
                n=self.config.reorder.diff_context,
            )
        )

    def _edit_details(self, source: SourceFile, assist: Assist) -> list[dict]:
        details = []
        for replacement in assist.edit:
            line, column = source.line_col(replacement.range.start)
            details.append(
                {
                    "line": line,
                    "column": column,
                    "old_text": source.text[
                        replacement.range.start : replacement.range.end
                    ],
                    "new_text": replacement.new_text,
                }
            )
        return details

    # ============================================================
    # Check mode
    # ============================================================

    def check_file(self, file_path: Path) -> list[ReorderFinding]:
        """
        Report every construct of a file whose fields are out of order

        Raises:
            SourceParseError: If the file cannot be parsed
            OSError: If the file cannot be read
        """
        source = parse_source(self.read_file(file_path))
        sema = Semantics(source)
        findings = []
        for spec in (RECORD_LIT, RECORD_PAT):
            for construct in source.descendants(spec.kind):
                plan = plan_reorder(source, sema, construct, spec)
                if plan is None:
                    continue
                line, column = source.line_col(source.text_range(construct).start)
                findings.append(
                    ReorderFinding(
                        file_path=file_path,
                        line=line,
                        column=column,
                        construct=source.text_of(construct.children[0]),
                        current_order=[field.key for field in plan.fields],
                        expected_order=[field.key for field in plan.sorted_fields],
                    )
                )
        findings.sort(key=lambda finding: (finding.line, finding.column))
        self.logger.debug(f"{file_path}: {len(findings)} constructs out of order")
        return findings

    def check_path(
        self,
        path: Path,
        recursive: bool = False,
    ) -> tuple[list[ReorderFinding], list[ProcessResult]]:
        """
        Check every processable file under a path

        Returns:
            Findings, and ERROR results for files that could not be checked
        """
        findings = []
        errors = []
        for file_path in self.collect_files(path, recursive):
            try:
                findings.extend(self.check_file(file_path))
            except (OSError, UnicodeDecodeError, SourceParseError) as e:
                errors.append(
                    ProcessResult(
                        file_path=file_path,
                        status=ProcessingStatus.ERROR,
                        error_message=str(e),
                    )
                )
        return findings, errors
