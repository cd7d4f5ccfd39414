"""
Structural diff between two syntax elements of the same source file
"""

import logging
from dataclasses import dataclass, field

from lark import Tree

from field_reorder.core.syntax import Element, SourceFile, kind_of
from field_reorder.core.text_edit import Replacement, TextEditBuilder, TextRange

logger = logging.getLogger(__name__)


@dataclass
class TreeDiff:
    """Replacements turning the text of one element into another's"""

    replacements: list[Replacement] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.replacements

    def into_text_edit(self, builder: TextEditBuilder) -> None:
        for replacement in self.replacements:
            builder.replace(replacement.range, replacement.new_text)


def diff(source: SourceFile, old: Element, new: Element) -> TreeDiff:
    """
    Compute the element-level replacements that turn old into new

    Elements of the same kind with the same text produce nothing. Nodes of
    the same kind and arity are compared child by child, trivia between
    children included. Anything else replaces the whole old element.

    Args:
        source: Source file both elements belong to
        old: Element whose range gets rewritten
        new: Element providing the replacement text

    Returns:
        TreeDiff with non-overlapping replacements inside old's range
    """
    result = TreeDiff()
    _diff_elements(source, old, new, result)
    logger.debug(
        f"Diff {kind_of(old)} -> {kind_of(new)}: "
        f"{len(result.replacements)} replacements"
    )
    return result


def _diff_elements(
    source: SourceFile,
    old: Element,
    new: Element,
    result: TreeDiff,
) -> None:
    if old is new:
        return
    same_kind = type(old) is type(new) and kind_of(old) == kind_of(new)
    if same_kind and source.text_of(old) == source.text_of(new):
        return

    if (
        same_kind
        and isinstance(old, Tree)
        and len(old.children) == len(new.children)
        and old.children
    ):
        for index, (old_child, new_child) in enumerate(
            zip(old.children, new.children)
        ):
            if index:
                _diff_trivia(
                    source,
                    old.children[index - 1],
                    old_child,
                    new.children[index - 1],
                    new_child,
                    result,
                )
            _diff_elements(source, old_child, new_child, result)
        return

    result.replacements.append(
        Replacement(source.text_range(old), source.text_of(new))
    )


def _diff_trivia(
    source: SourceFile,
    old_left: Element,
    old_right: Element,
    new_left: Element,
    new_right: Element,
    result: TreeDiff,
) -> None:
    old_gap = source.text_between(old_left, old_right)
    new_gap = source.text_between(new_left, new_right)
    if old_gap != new_gap:
        start = source.text_range(old_left).end
        end = source.text_range(old_right).start
        result.replacements.append(
            Replacement(TextRange(start, end), new_gap)
        )
