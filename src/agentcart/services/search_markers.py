from __future__ import annotations

import re

# Der Shopping-Agent bettet Suchaufträge als [SEARCH: <query>] in seine Antwort ein.
_MARKER = re.compile(r"\[SEARCH:\s*(.+?)\]")
_MARKER_WITH_NEWLINE = re.compile(r"\[SEARCH:\s*.+?\]\n?")


def extract_search_markers(text: str) -> list[str]:
    return [m.group(1).strip() for m in _MARKER.finditer(text)]


def strip_search_markers(text: str) -> str:
    return _MARKER_WITH_NEWLINE.sub("", text).strip()
