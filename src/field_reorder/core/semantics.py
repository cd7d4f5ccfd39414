"""
Single-file name resolution for paths and type paths
"""

import logging
from dataclasses import dataclass
from enum import Enum

from lark import Token, Tree

from field_reorder.core.syntax import SourceFile, first_node, first_token, is_node

logger = logging.getLogger(__name__)


class DefKind(Enum):
    """Kind of item a path can resolve to"""

    STRUCT = "struct"
    ENUM = "enum"
    VARIANT = "variant"
    FUNCTION = "function"
    TYPE_ALIAS = "type_alias"
    TRAIT = "trait"
    MODULE = "module"
    CONST = "const"


_ITEM_KINDS = {
    "struct_def": DefKind.STRUCT,
    "enum_def": DefKind.ENUM,
    "fn_def": DefKind.FUNCTION,
    "type_alias": DefKind.TYPE_ALIAS,
    "trait_def": DefKind.TRAIT,
    "mod_def": DefKind.MODULE,
    "const_def": DefKind.CONST,
}

_SCOPE_KINDS = ("block", "mod_def", "source_file")
_MODULE_KINDS = ("mod_def", "source_file")


@dataclass(eq=False)
class Definition:
    """An item a path resolved to"""

    kind: DefKind
    name: str
    node: Tree

    def __str__(self) -> str:
        return f"{self.kind.value} {self.name}"


@dataclass(eq=False)
class StructDef(Definition):
    """A struct item with its declared fields"""

    def field_names(self) -> list[str]:
        """
        Declared field names in declaration order

        Tuple struct fields are named by position, unit structs have none.
        """
        record_fields = first_node(self.node, "record_field_def_list")
        if record_fields is not None:
            return [
                str(first_token(field_def, "NAME"))
                for field_def in record_fields.children
                if is_node(field_def, "record_field_def")
            ]
        tuple_fields = first_node(self.node, "tuple_field_def_list")
        if tuple_fields is not None:
            count = sum(
                1 for child in tuple_fields.children if is_node(child, "tuple_field_def")
            )
            return [str(index) for index in range(count)]
        return []


# Result of resolving a path
PathResolution = Definition


def item_name(item: Tree) -> str | None:
    """Name of an item node, None for anonymous items like impls"""
    name = first_token(item, "NAME")
    return str(name) if name is not None else None


def path_segments(path: Tree) -> list[str]:
    """
    Segment names of a path or type path

    Generic arguments, including turbofish, are dropped.
    """
    if path.data == "type_path":
        return [
            str(_segment_head(segment))
            for segment in path.children
            if is_node(segment, "type_segment")
        ]
    return [
        str(child)
        for child in path.children
        if isinstance(child, Token) and child != "::"
    ]


def _segment_head(segment: Tree) -> Token:
    return next(child for child in segment.children if isinstance(child, Token))


class Semantics:
    """Resolve paths to the items declared in one source file"""

    def __init__(self, source_file: SourceFile):
        self.source_file = source_file

    def resolve_path(self, path: Tree) -> PathResolution | None:
        """
        Resolve a path or type path node to its definition

        Args:
            path: A path or type_path node of the source file

        Returns:
            Definition, or None when the path cannot be resolved
        """
        segments = path_segments(path)
        if not segments:
            return None
        resolution = self._resolve_segments(path, segments)
        if resolution is None:
            logger.debug(f"Unresolved path: {'::'.join(segments)}")
        else:
            logger.debug(f"Resolved {'::'.join(segments)} to {resolution}")
        return resolution

    def _resolve_segments(
        self,
        anchor: Tree,
        segments: list[str],
    ) -> Definition | None:
        head, rest = segments[0], segments[1:]

        if head == "crate":
            current: Definition | Tree | None = self.source_file.tree
        elif head == "self":
            current = self._enclosing_module(anchor)
        elif head == "super":
            current = self._parent_module(self._enclosing_module(anchor))
            while rest and rest[0] == "super" and current is not None:
                current = self._parent_module(current)
                rest = rest[1:]
        elif head == "Self":
            current = self._resolve_self_type(anchor)
        else:
            current = self._lookup_lexical(anchor, head)

        for segment in rest:
            if current is None:
                return None
            current = self._lookup_member(current, segment)

        if isinstance(current, Tree):
            # Bare module keyword paths such as `crate` or `self`
            if current is self.source_file.tree:
                return None
            return self._definition(current)
        return current

    # ============================================================
    # Scopes
    # ============================================================

    def _enclosing_module(self, node: Tree) -> Tree:
        for ancestor in self.source_file.ancestors(node):
            if ancestor is not node and ancestor.data in _MODULE_KINDS:
                return ancestor
        return self.source_file.tree

    def _parent_module(self, module: Tree) -> Tree | None:
        if module is self.source_file.tree:
            return None
        return self._enclosing_module(module)

    def _lookup_lexical(self, anchor: Tree, name: str) -> Definition | None:
        """Search enclosing blocks outward, stopping at the first module"""
        for scope in self.source_file.ancestors(anchor):
            if scope is anchor or scope.data not in _SCOPE_KINDS:
                continue
            found = self._lookup_item(scope, name)
            if found is not None:
                return found
            if scope.data in _MODULE_KINDS:
                break
        return None

    def _lookup_item(self, scope: Tree, name: str) -> Definition | None:
        for child in scope.children:
            if not isinstance(child, Tree) or child.data not in _ITEM_KINDS:
                continue
            if item_name(child) == name:
                return self._definition(child)
        return None

    def _lookup_member(
        self,
        parent: Definition | Tree,
        name: str,
    ) -> Definition | None:
        if isinstance(parent, Tree):
            return self._lookup_item(parent, name)
        if parent.kind is DefKind.MODULE:
            return self._lookup_item(parent.node, name)
        if parent.kind is DefKind.ENUM:
            for variant in parent.node.children:
                if is_node(variant, "variant_def") and item_name(variant) == name:
                    return Definition(DefKind.VARIANT, name, variant)
        return None

    def _resolve_self_type(self, anchor: Tree) -> Definition | None:
        for ancestor in self.source_file.ancestors(anchor):
            if ancestor.data == "trait_def":
                return None
            if ancestor.data != "impl_def":
                continue
            types = [
                child
                for child in ancestor.children
                if is_node(child, "type_path")
                or (isinstance(child, Tree) and child.data.endswith("_type"))
            ]
            # `impl Trait for Type` names the self type last
            self_type = types[-1] if types else None
            if self_type is None or not is_node(self_type, "type_path"):
                return None
            segments = path_segments(self_type)
            if "Self" in segments:
                return None
            return self._resolve_segments(ancestor, segments)
        return None

    def _definition(self, item: Tree) -> Definition | None:
        kind = _ITEM_KINDS.get(item.data)
        name = item_name(item)
        if kind is None or name is None:
            return None
        if kind is DefKind.STRUCT:
            return StructDef(kind, name, item)
        return Definition(kind, name, item)
