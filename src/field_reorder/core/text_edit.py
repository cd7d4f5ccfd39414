"""
Text ranges and edit scripts applied to source text
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class TextRange:
    """Half-open character range [start, end) into a source text"""

    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Invalid range: {self.start}..{self.end}")

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    def contains(self, offset: int) -> bool:
        """Check if offset is inside the range, both ends included"""
        return self.start <= offset <= self.end

    def contains_range(self, other: "TextRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    def intersects(self, other: "TextRange") -> bool:
        """Check if the ranges overlap by at least one character"""
        return self.start < other.end and other.start < self.end

    def cover(self, other: "TextRange") -> "TextRange":
        """Smallest range containing both ranges"""
        return TextRange(min(self.start, other.start), max(self.end, other.end))


@dataclass(frozen=True)
class Replacement:
    """Replace the text in range with new_text"""

    range: TextRange
    new_text: str

    @property
    def is_insert(self) -> bool:
        return len(self.range) == 0

    def __str__(self) -> str:
        return f"{self.range} -> {self.new_text!r}"


@dataclass(frozen=True)
class TextEdit:
    """Ordered, non-overlapping replacements"""

    replacements: tuple[Replacement, ...] = field(default_factory=tuple)

    def __iter__(self):
        return iter(self.replacements)

    def __len__(self) -> int:
        return len(self.replacements)

    @property
    def is_empty(self) -> bool:
        return not self.replacements

    def apply(self, text: str) -> str:
        """
        Apply the edit to text

        Args:
            text: The text the edit ranges refer to

        Returns:
            Edited text
        """
        parts = []
        cursor = 0
        for replacement in self.replacements:
            if replacement.range.end > len(text):
                raise ValueError(f"Replacement {replacement} exceeds text length")
            parts.append(text[cursor : replacement.range.start])
            parts.append(replacement.new_text)
            cursor = replacement.range.end
        parts.append(text[cursor:])
        return "".join(parts)


class TextEditBuilder:
    """Collects replacements and produces a validated TextEdit"""

    def __init__(self):
        self._replacements: list[Replacement] = []

    def replace(self, text_range: TextRange, new_text: str) -> None:
        self._replacements.append(Replacement(text_range, new_text))

    def insert(self, offset: int, text: str) -> None:
        self.replace(TextRange(offset, offset), text)

    def delete(self, text_range: TextRange) -> None:
        self.replace(text_range, "")

    def finish(self) -> TextEdit:
        """
        Sort collected replacements by position

        Raises:
            ValueError: If two replacements overlap
        """
        # Stable sort keeps insertions at the same offset in call order
        ordered = sorted(self._replacements, key=lambda r: r.range.start)
        for previous, current in zip(ordered, ordered[1:]):
            if previous.range.end > current.range.start:
                raise ValueError(
                    f"Overlapping replacements: {previous.range} and {current.range}"
                )
        logger.debug(f"Built text edit with {len(ordered)} replacements")
        return TextEdit(tuple(ordered))
