"""
Category Label Model

A category is either a simple label ("십일조") or a (main, sub) pair.
Inside the application it is always a CategoryLabel value; the composite
string form exists only on the wire:

    "<main> (세부) (<sub>)"

This exact marker and spacing is part of the saved snapshot format and must
be reproduced byte-for-byte.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


SUB_CATEGORY_MARKER = "(세부)"

# Reserved: a main category may never contain this
COMPOSITE_DELIMITER = f" {SUB_CATEGORY_MARKER} ("

# Main is the text before the first delimiter; sub runs to the final ")"
_COMPOSITE_PATTERN = re.compile(r"(.*?) \(세부\) \((.*)\)")


class CategoryLabel(BaseModel):
    """
    Tagged two-level category.

    `sub` is None for simple labels; an empty sub is normalised to None.

    A stored string that contains the delimiter but is not a complete
    composite (damaged data) is kept verbatim as a simple label so it
    re-encodes byte-for-byte. Such a label is still totalled under the
    text before its first delimiter, see `root`.
    """
    model_config = ConfigDict(frozen=True)

    main: str
    sub: Optional[str] = None

    @field_validator("sub")
    @classmethod
    def empty_sub_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def validate_main(self) -> "CategoryLabel":
        if self.sub is not None and COMPOSITE_DELIMITER in self.main:
            raise ValueError(
                f"Main category cannot contain the reserved marker {COMPOSITE_DELIMITER!r}"
            )
        return self

    @classmethod
    def decode(cls, label: str) -> "CategoryLabel":
        """
        Parse a stored label. Never raises.

        Anything that is not a complete composite with a non-empty sub
        becomes a simple label holding the whole string.
        """
        match = _COMPOSITE_PATTERN.fullmatch(label)
        if match is None or not match.group(2):
            return cls(main=label)
        main, sub = match.groups()
        return cls(main=main, sub=sub)

    @property
    def is_composite(self) -> bool:
        return self.sub is not None

    @property
    def is_damaged(self) -> bool:
        """True for a simple label that still contains the delimiter."""
        return self.sub is None and COMPOSITE_DELIMITER in self.main

    @property
    def root(self) -> str:
        """Main category the label is searched and totalled under."""
        return self.main.split(COMPOSITE_DELIMITER, 1)[0]

    def encode(self) -> str:
        """Wire form."""
        if self.sub is None:
            return self.main
        return f"{self.main}{COMPOSITE_DELIMITER}{self.sub})"

    def render(self) -> str:
        """Display form: "<main> (<sub>)" without the marker."""
        if self.sub is None:
            return self.main
        return f"{self.main} ({self.sub})"

    def with_main(self, main: str) -> "CategoryLabel":
        """Replace the root, keeping the sub and any damaged tail."""
        tail = self.main[len(self.root):]
        return CategoryLabel(main=main + tail, sub=self.sub)

    def with_sub(self, sub: Optional[str]) -> "CategoryLabel":
        return CategoryLabel(main=self.main, sub=sub)

    def __str__(self) -> str:
        return self.encode()
