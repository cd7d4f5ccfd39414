"""
Assist: reorder the fields of a struct literal or struct pattern to match
the order they are declared in.

```
struct Foo {foo: i32, bar: i32};
const test: Foo = <|>Foo {bar: 0, foo: 1}
```
->
```
struct Foo {foo: i32, bar: i32};
const test: Foo = Foo {foo: 1, bar: 0}
```
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from lark import Tree

from field_reorder.assists.assist_ctx import (
    Assist,
    AssistContext,
    AssistId,
    AssistKind,
)
from field_reorder.core.diff import diff
from field_reorder.core.semantics import Semantics, StructDef
from field_reorder.core.syntax import SourceFile, first_node, first_token
from field_reorder.core.text_edit import TextEditBuilder

logger = logging.getLogger(__name__)

REORDER_FIELDS = AssistId("reorder_fields", AssistKind.REFACTOR_REWRITE)
REORDER_FIELDS_LABEL = "Reorder record fields"

# Rank of fields the struct does not declare
UNRANKED = sys.maxsize


class FieldKind(Enum):
    """Orderable field entries of a construct"""

    RECORD_FIELD = "record_field"
    BIND_PAT = "bind_pat"
    RECORD_FIELD_PAT = "record_field_pat"


@dataclass(frozen=True)
class ConstructSpec:
    """What a construct variant looks like in the tree"""

    kind: str
    field_list_kind: str
    field_kinds: frozenset[FieldKind]


RECORD_LIT = ConstructSpec(
    kind="record_lit",
    field_list_kind="record_field_list",
    field_kinds=frozenset({FieldKind.RECORD_FIELD}),
)
RECORD_PAT = ConstructSpec(
    kind="record_pat",
    field_list_kind="record_pat_field_list",
    field_kinds=frozenset({FieldKind.RECORD_FIELD_PAT, FieldKind.BIND_PAT}),
)


@dataclass(frozen=True, eq=False)
class FieldNode:
    """A field entry of a construct with its ordering key"""

    kind: FieldKind
    node: Tree
    key: str


def _record_field_key(source: SourceFile, node: Tree) -> str:
    name = first_token(node, "NAME")
    if name is not None:
        return str(name)
    # Shorthand `Foo { foo }`: the value doubles as the field name
    return source.text_of(node.children[-1])


def _bound_name_key(source: SourceFile, node: Tree) -> str:
    return str(first_token(node, "NAME"))


_KEY_EXTRACTORS: dict[FieldKind, Callable[[SourceFile, Tree], str]] = {
    FieldKind.RECORD_FIELD: _record_field_key,
    FieldKind.BIND_PAT: _bound_name_key,
    FieldKind.RECORD_FIELD_PAT: _bound_name_key,
}
_FIELD_KINDS = {kind.value: kind for kind in FieldKind}


# ============================================================
# Field Classifier
# ============================================================


def classify_fields(
    source: SourceFile,
    construct: Tree,
    spec: ConstructSpec,
) -> list[FieldNode]:
    """
    Orderable fields of a construct in source order

    Rest markers, spreads and punctuation are not part of the result.
    """
    field_list = first_node(construct, spec.field_list_kind)
    if field_list is None:
        return []
    fields = []
    for child in field_list.children:
        if not isinstance(child, Tree):
            continue
        kind = _FIELD_KINDS.get(child.data)
        if kind not in spec.field_kinds:
            continue
        fields.append(FieldNode(kind, child, _KEY_EXTRACTORS[kind](source, child)))
    return fields


# ============================================================
# Rank Resolver
# ============================================================


def struct_definition(sema: Semantics, construct: Tree) -> StructDef | None:
    """Struct the construct's path resolves to, if it is a struct"""
    path = first_node(construct, "path")
    if path is None:
        return None
    resolution = sema.resolve_path(path)
    if not isinstance(resolution, StructDef):
        return None
    return resolution


def compute_field_ranks(sema: Semantics, construct: Tree) -> dict[str, int] | None:
    struct = struct_definition(sema, construct)
    if struct is None:
        return None
    return {name: index for index, name in enumerate(struct.field_names())}


# ============================================================
# Reorder Planner
# ============================================================


def sorted_by_rank(fields: list[FieldNode], ranks: dict[str, int]) -> list[FieldNode]:
    # sorted() is stable: equal ranks keep their source order
    return sorted(fields, key=lambda field: ranks.get(field.key, UNRANKED))


@dataclass(frozen=True)
class ReorderPlan:
    """Fields of a construct before and after reordering"""

    construct: Tree
    fields: list[FieldNode]
    sorted_fields: list[FieldNode]


def plan_reorder(
    source: SourceFile,
    sema: Semantics,
    construct: Tree,
    spec: ConstructSpec,
) -> ReorderPlan | None:
    """
    Compute the declaration-ordered field sequence of a construct

    Returns:
        ReorderPlan, or None when the type does not resolve to a struct or
        the fields are already in declaration order
    """
    ranks = compute_field_ranks(sema, construct)
    if ranks is None:
        logger.debug(f"{spec.kind}: path does not resolve to a struct")
        return None
    fields = classify_fields(source, construct, spec)
    sorted_fields = sorted_by_rank(fields, ranks)
    if all(old is new for old, new in zip(fields, sorted_fields)):
        logger.debug(f"{spec.kind}: fields already in declaration order")
        return None
    return ReorderPlan(construct, fields, sorted_fields)


# ============================================================
# Edit Synthesizer
# ============================================================


def _build_edit(
    source: SourceFile,
    plan: ReorderPlan,
    builder: TextEditBuilder,
) -> None:
    for old, new in zip(plan.fields, plan.sorted_fields):
        diff(source, old.node, new.node).into_text_edit(builder)


def _reorder(ctx: AssistContext, spec: ConstructSpec) -> Assist | None:
    construct = ctx.find_node_at_offset(spec.kind)
    if construct is None:
        return None
    source = ctx.source_file
    plan = plan_reorder(source, ctx.semantics, construct, spec)
    if plan is None:
        return None
    return ctx.add_assist(
        REORDER_FIELDS,
        REORDER_FIELDS_LABEL,
        source.text_range(construct),
        lambda builder: _build_edit(source, plan, builder),
    )


def reorder_fields(ctx: AssistContext) -> Assist | None:
    """Reorder the fields of the struct literal or pattern at the cursor"""
    return _reorder(ctx, RECORD_LIT) or _reorder(ctx, RECORD_PAT)
