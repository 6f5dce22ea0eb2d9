"""Turn synthesized fragments into text edits on a .http document."""

from pydantic import BaseModel

from spring_http_requests.parser.base import SynthesisResult
from spring_http_requests.parser.httpfile import HttpRequestBlock


class TextEdit(BaseModel):
    offset: int
    text: str


def plan_edits(
    block: HttpRequestBlock, caret: int, result: SynthesisResult, newline: str = "\n"
) -> list[TextEdit]:
    """Place each fragment; offsets refer to the unmodified document.

    Generated line breaks use ``newline`` so CRLF documents stay CRLF.
    """
    edits = []

    # Before the headers: without a version the target ends the request line
    if result.query_string:
        edits.append(TextEdit(offset=block.target_end, text=result.query_string))

    header_offset = block.header_section_end
    for line in result.header_lines:
        edits.append(TextEdit(offset=header_offset, text=f"{newline}{line}"))

    caret_text = "\n".join(t for t in (result.body_text, result.form_text) if t)
    if caret_text:
        edits.append(TextEdit(offset=caret, text=caret_text.replace("\n", newline)))

    return edits


def apply_edits(text: str, edits: list[TextEdit]) -> str:
    """Apply all edits in one pass; equal offsets keep their order."""
    for edit in edits:
        if not 0 <= edit.offset <= len(text):
            raise ValueError(f"Edit offset {edit.offset} outside document of length {len(text)}")

    parts = []
    cursor = 0
    for edit in sorted(edits, key=lambda e: e.offset):
        parts.append(text[cursor:edit.offset])
        parts.append(edit.text)
        cursor = edit.offset
    parts.append(text[cursor:])
    return "".join(parts)
