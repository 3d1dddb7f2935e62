"""Split generated wellness plans into headed sections."""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel

HEADING_PATTERN = re.compile(r"^###\s+(.*?)\s*$")


class PlanSection(BaseModel):
    """One ### heading block of a wellness plan."""

    heading: Optional[str] = None
    body: str = ""


def render_wellness_plan(text: str) -> List[PlanSection]:
    """Return ``### heading`` sections in order.

    Text before the first heading becomes a section without a heading; an
    empty preamble is dropped.
    """

    sections: List[PlanSection] = []
    heading: Optional[str] = None
    lines: List[str] = []

    def flush() -> None:
        body = "\n".join(lines).strip()
        if heading is not None or body:
            sections.append(PlanSection(heading=heading, body=body))

    for line in text.splitlines():
        match = HEADING_PATTERN.match(line)
        if match:
            flush()
            heading = match.group(1)
            lines = []
        else:
            lines.append(line)
    flush()

    return sections
