"""Text extraction for event-source adapters.

Window events carry a UI node tree; notification events carry a title and a
body. Both are flattened to one string before they reach the debouncer."""

from typing import List, Optional

from netra.models import WindowNode

# Node strings this short are labels and buttons, not message content
MIN_NODE_TEXT: int = 5


def extract_window_text(node: Optional[WindowNode]) -> str:
    """Depth-first walk of a window tree, keeping text and content
    descriptions longer than MIN_NODE_TEXT characters."""
    parts: List[str] = []
    if node is not None:
        _collect(node, parts)
    return " ".join(parts)


def _collect(node: WindowNode, parts: List[str]) -> None:
    for value in (node.text, node.contentDescription):
        if value and len(value) > MIN_NODE_TEXT:
            parts.append(value)
    for child in node.children:
        _collect(child, parts)


def notification_text(title: Optional[str], body: Optional[str]) -> str:
    return f"{title or ''} {body or ''}"


def is_candidate(text: str, min_length: int = 10) -> bool:
    """Pre-check an adapter applies before handing text to the pipeline."""
    return bool(text and text.strip()) and len(text) > min_length
