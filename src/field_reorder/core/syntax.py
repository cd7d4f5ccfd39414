"""
Lossless syntax layer for the Rust subset handled by the assists
"""

from pathlib import Path
from typing import Iterator

from lark import Lark, Token, Tree, UnexpectedInput

from field_reorder.core.text_edit import TextRange

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text(encoding="utf-8")

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    start="source_file",
    propagate_positions=True,
    maybe_placeholders=False,
    keep_all_tokens=True,
)

# Tree node or token
Element = Tree | Token


class SourceParseError(ValueError):
    """Raised when the source text is outside the supported Rust subset"""

    def __init__(self, message: str, *, line: int, column: int) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def parse_source(text: str) -> "SourceFile":
    """
    Parse Rust source text into a range-addressable syntax tree

    Args:
        text: Full source text

    Returns:
        SourceFile wrapping the parse tree

    Raises:
        SourceParseError: If the text cannot be parsed
    """
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as e:
        context = e.get_context(text).rstrip()
        raise SourceParseError(
            f"Syntax error at line {e.line}, column {e.column}:\n{context}",
            line=e.line,
            column=e.column,
        ) from e
    return SourceFile(text, tree)


def is_node(element: object, kind: str | None = None) -> bool:
    """Check if element is a tree node, optionally of the given kind"""
    return isinstance(element, Tree) and (kind is None or element.data == kind)


def is_token(element: object, kind: str | None = None) -> bool:
    """Check if element is a token, optionally of the given terminal type"""
    return isinstance(element, Token) and (kind is None or element.type == kind)


def kind_of(element: Element) -> str:
    """Rule name for nodes, terminal type for tokens"""
    if isinstance(element, Token):
        return element.type
    return str(element.data)


def first_token(node: Tree, kind: str) -> Token | None:
    """First direct child token of the given terminal type"""
    for child in node.children:
        if is_token(child, kind):
            return child
    return None


def first_node(node: Tree, kind: str) -> Tree | None:
    """First direct child node of the given kind"""
    for child in node.children:
        if is_node(child, kind):
            return child
    return None


class SourceFile:
    """Immutable parse tree together with the text it was parsed from"""

    def __init__(self, text: str, tree: Tree):
        self.text = text
        self.tree = tree
        self._parents: dict[int, Tree] = {}
        self._depths: dict[int, int] = {id(tree): 0}
        for node in tree.iter_subtrees_topdown():
            depth = self._depths[id(node)]
            for child in node.children:
                self._parents[id(child)] = node
                if isinstance(child, Tree):
                    self._depths[id(child)] = depth + 1

    # ============================================================
    # Ranges and text
    # ============================================================

    def text_range(self, element: Element) -> TextRange:
        """Byte range covered by a node or token, trivia excluded"""
        if isinstance(element, Token):
            return TextRange(element.start_pos, element.end_pos)
        if element is self.tree:
            return TextRange(0, len(self.text))
        if element.meta.empty:
            # Only reachable for nodes without any token
            return TextRange(0, 0)
        return TextRange(element.meta.start_pos, element.meta.end_pos)

    def text_of(self, element: Element) -> str:
        """Source text of a node or token, including inner trivia"""
        if isinstance(element, Token):
            return str(element)
        text_range = self.text_range(element)
        return self.text[text_range.start : text_range.end]

    def text_between(self, left: Element, right: Element) -> str:
        """Trivia text between two sibling elements"""
        start = self.text_range(left).end
        end = self.text_range(right).start
        return self.text[start:end]

    def offset_at(self, line: int, column: int) -> int:
        """
        Convert a 1-based line and column to a character offset

        Raises:
            ValueError: If the position lies outside the text
        """
        lines = self.text.splitlines(keepends=True)
        if line < 1 or line > max(len(lines), 1):
            raise ValueError(f"Line {line} out of range (1-{len(lines)})")
        line_text = lines[line - 1] if lines else ""
        if column < 1 or column > len(line_text.rstrip("\r\n")) + 1:
            raise ValueError(f"Column {column} out of range on line {line}")
        return sum(len(text) for text in lines[: line - 1]) + column - 1

    def line_col(self, offset: int) -> tuple[int, int]:
        """Convert a character offset to a 1-based line and column"""
        before = self.text[:offset]
        line = before.count("\n") + 1
        column = offset - (before.rfind("\n") + 1) + 1
        return line, column

    # ============================================================
    # Navigation
    # ============================================================

    def parent(self, element: Element) -> Tree | None:
        return self._parents.get(id(element))

    def ancestors(self, element: Element) -> Iterator[Tree]:
        """Yield the element itself (if a node) and every enclosing node"""
        node = element if isinstance(element, Tree) else self.parent(element)
        while node is not None:
            yield node
            node = self.parent(node)

    def descendants(self, kind: str | None = None) -> Iterator[Tree]:
        """Yield nodes in source order, optionally filtered by kind"""
        for node in self.tree.iter_subtrees_topdown():
            if kind is None or node.data == kind:
                yield node

    def covering_nodes(self, offset: int) -> list[Tree]:
        """
        Nodes whose range contains the offset, innermost first

        An offset sitting exactly between two tokens touches both of them,
        so the range check is inclusive on both ends.
        """
        covering = [
            node
            for node in self.tree.iter_subtrees()
            if self.text_range(node).contains(offset)
        ]
        covering.sort(
            key=lambda node: (len(self.text_range(node)), -self._depths[id(node)])
        )
        return covering

    def find_node_at_offset(self, offset: int, kind: str) -> Tree | None:
        """Innermost node of the given kind covering the offset"""
        for node in self.covering_nodes(offset):
            if node.data == kind:
                return node
        return None
