"""
Registry of source assists
"""

import logging
from typing import Callable

from field_reorder.assists.assist_ctx import Assist, AssistContext
from field_reorder.assists.reorder_fields import reorder_fields
from field_reorder.core.syntax import SourceParseError, parse_source

logger = logging.getLogger(__name__)

ALL_ASSISTS: list[Callable[[AssistContext], Assist | None]] = [
    reorder_fields,
]


def resolve_assists(ctx: AssistContext) -> list[Assist]:
    """Run every registered assist and collect the applicable ones"""
    assists = []
    for handler in ALL_ASSISTS:
        assist = handler(ctx)
        if assist is not None:
            assists.append(assist)
    logger.debug(f"{len(assists)} assists applicable at offset {ctx.offset}")
    return assists


def assists_at(text: str, offset: int | None) -> list[Assist]:
    """
    Parse source text and collect the assists applicable at an offset

    Text outside the supported syntax has no applicable assists.
    """
    try:
        source = parse_source(text)
    except SourceParseError as e:
        logger.debug(f"No assists for unparsable source: {e}")
        return []
    return resolve_assists(AssistContext(source, offset))
