"""Find fenced JSON blocks in assistant text."""

import re
from typing import Iterator

from intake.core.constants import GENERIC_JSON_MARKER, RESUME_JSON_MARKER

_MARKERS = f"(?:{re.escape(RESUME_JSON_MARKER)}|{re.escape(GENERIC_JSON_MARKER)})"

# Opening fence, then a body that never crosses another ```, then a closing fence
# that is not itself the opening of the next block. An opening fence without a
# close cannot match, so the scan resumes at the next opening fence.
_FENCED_BLOCK_RE = re.compile(
    rf"```{_MARKERS}\b(?P<body>(?:(?!```).)*)```(?!{_MARKERS}\b)",
    re.DOTALL,
)


def iter_fenced_payloads(text: str | None) -> Iterator[str]:
    """Yield the stripped body of every ```resume-json / ```json block, in document order."""
    if not text or "```" not in text:
        return
    for match in _FENCED_BLOCK_RE.finditer(text):
        yield match.group("body").strip()
