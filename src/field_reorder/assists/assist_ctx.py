"""
Context handed to assists and the assist result model
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from lark import Tree

from field_reorder.core.semantics import Semantics
from field_reorder.core.syntax import SourceFile
from field_reorder.core.text_edit import TextEdit, TextEditBuilder, TextRange

logger = logging.getLogger(__name__)


class AssistKind(Enum):
    """Category an assist is offered under"""

    QUICK_FIX = "quickfix"
    REFACTOR = "refactor"
    REFACTOR_EXTRACT = "refactor.extract"
    REFACTOR_INLINE = "refactor.inline"
    REFACTOR_REWRITE = "refactor.rewrite"


@dataclass(frozen=True)
class AssistId:
    id: str
    kind: AssistKind


@dataclass(frozen=True)
class Assist:
    """An applicable assist with the edit it performs"""

    id: AssistId
    label: str
    target: TextRange
    edit: TextEdit

    def apply(self, text: str) -> str:
        return self.edit.apply(text)


class AssistContext:
    """
    Cursor position and analysis handles for one assist request

    Args:
        source_file: Parsed source the request refers to
        offset: Cursor offset, None when there is no cursor
        semantics: Resolver to use, built from source_file when omitted
    """

    def __init__(
        self,
        source_file: SourceFile,
        offset: int | None,
        semantics: Semantics | None = None,
    ):
        self.source_file = source_file
        self.offset = offset
        self.semantics = semantics or Semantics(source_file)

    def find_node_at_offset(self, kind: str) -> Tree | None:
        if self.offset is None:
            return None
        return self.source_file.find_node_at_offset(self.offset, kind)

    def add_assist(
        self,
        assist_id: AssistId,
        label: str,
        target: TextRange,
        build: Callable[[TextEditBuilder], None],
    ) -> Assist:
        """
        Build the edit for an applicable assist

        Args:
            assist_id: Identifier of the assist
            label: Human readable label
            target: Range the assist applies to
            build: Callback filling the edit builder

        Returns:
            Assist carrying the finished edit
        """
        builder = TextEditBuilder()
        build(builder)
        assist = Assist(assist_id, label, target, builder.finish())
        logger.debug(f"Assist {assist_id.id} available at {target}")
        return assist
