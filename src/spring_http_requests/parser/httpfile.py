"""Parser for JetBrains HTTP Client request files (.http).

Only the structure needed to place generated text is recovered: the
request line, the request target, the header fields and whether a message
body follows. All positions are character offsets into the source text.
"""

import re
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel

from spring_http_requests.parser.base import HeaderField

SEPARATOR_RE = re.compile(r"^###")
COMMENT_PREFIXES = ("#", "//")
REQUEST_LINE_RE = re.compile(
    r"^(?:(GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS|TRACE|CONNECT)\s+)?(\S+)(?:\s+HTTP/\S+)?\s*$"
)
HEADER_RE = re.compile(r"^([^\s:{\"]+):[ \t]*(.*?)\s*$")
LEADING_VARIABLE_RE = re.compile(r"^\{\{[^}]*\}\}")


class HttpHeader(BaseModel):
    name: str
    value: str
    start: int
    end: int


class HttpRequestBlock(BaseModel):
    """One request of a .http file."""

    method: str
    target: str
    start: int
    end: int
    request_line_start: int
    request_line_end: int
    target_start: int
    target_end: int
    headers: list[HttpHeader] = []
    body_start: int | None = None

    @property
    def path(self) -> str:
        return request_path(self.target)

    @property
    def header_fields(self) -> list[HeaderField]:
        return [HeaderField(name=h.name, value=h.value) for h in self.headers]

    @property
    def header_section_end(self) -> int:
        """End of the last header field, or of the request line."""
        if self.headers:
            return self.headers[-1].end
        return self.request_line_end

    @property
    def has_body(self) -> bool:
        return self.body_start is not None


class HttpDocument(BaseModel):
    text: str
    newline: str = "\n"
    requests: list[HttpRequestBlock] = []

    def request_at(self, caret: int) -> HttpRequestBlock | None:
        """Request whose blank tail holds the caret, if it has no body yet."""
        for block in self.requests:
            section_end = block.header_section_end
            if not section_end < caret <= block.end:
                continue
            gap = self.text[section_end:caret]
            if "\n" not in gap or gap.strip():
                return None
            if block.has_body:
                return None
            return block
        return None

    def offset_of_line(self, line: int) -> int:
        """Offset of the start of a 1-based line number."""
        if line < 1:
            raise ValueError(f"Line numbers start at 1, got {line}")
        offset = 0
        for _ in range(line - 1):
            newline = self.text.find("\n", offset)
            if newline == -1:
                raise ValueError(f"Line {line} is past the end of the document")
            offset = newline + 1
        return offset


def parse_http_document(text: str) -> HttpDocument:
    """Split a .http document into request blocks."""
    requests: list[HttpRequestBlock] = []
    state = None
    block_start = 0
    current: dict | None = None

    def close(end: int) -> None:
        if current is not None:
            requests.append(HttpRequestBlock(end=end, **current))

    offset = 0
    for raw_line in text.splitlines(keepends=True):
        line = raw_line.rstrip("\r\n")
        line_start = offset
        offset += len(raw_line)

        if SEPARATOR_RE.match(line):
            close(line_start)
            current, state, block_start = None, None, offset
            continue

        if state is None:
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIXES):
                continue
            match = REQUEST_LINE_RE.match(line)
            if match is None:
                continue
            current = {
                "method": match.group(1) or "GET",
                "target": match.group(2),
                "start": block_start,
                "request_line_start": line_start,
                "request_line_end": line_start + len(line),
                "target_start": line_start + match.start(2),
                "target_end": line_start + match.end(2),
                "headers": [],
            }
            state = "headers"
        elif state == "headers":
            if not line.strip():
                state = "gap"
                continue
            if line.lstrip().startswith(COMMENT_PREFIXES):
                continue
            match = HEADER_RE.match(line)
            if match is None:
                current["body_start"] = line_start
                state = "body"
                continue
            current["headers"].append(
                HttpHeader(
                    name=match.group(1).strip(),
                    value=match.group(2),
                    start=line_start,
                    end=line_start + len(line),
                )
            )
        elif state == "gap":
            if not line.strip():
                continue
            current["body_start"] = line_start
            state = "body"

    close(len(text))
    return HttpDocument(text=text, newline=detect_newline(text), requests=requests)


def load_http_document(file_path: Path) -> HttpDocument:
    # newline="" keeps CRLF line endings intact
    with open(file_path, encoding="utf-8", newline="") as f:
        return parse_http_document(f.read())


def detect_newline(text: str) -> str:
    """Line ending of the first line, LF when the text has none."""
    newline = text.find("\n")
    if newline > 0 and text[newline - 1] == "\r":
        return "\r\n"
    return "\n"


def request_path(target: str) -> str:
    """Absolute path of a request target, without host, query or fragment."""
    target = LEADING_VARIABLE_RE.sub("", target, count=1)
    if "://" in target:
        path = urlsplit(target).path
    else:
        path = target.split("#", 1)[0].split("?", 1)[0]
        if not path.startswith("/"):
            slash = path.find("/")
            path = path[slash:] if slash != -1 else ""
    return path or "/"
