"""Bounding of retrieved file content."""

TRUNCATION_MARKER = "\n... (content truncated due to length) ..."


def truncate(content: str, max_length: int) -> str:
    """
    Bound content to ``max_length`` characters.

    Content that fits is returned unchanged. Otherwise the text is cut at the
    last line break at or before ``max_length - len(TRUNCATION_MARKER)``,
    unless there is none or it falls before half of ``max_length``, in which
    case the cut is made exactly at that position. The marker is appended.

    Args:
        content: Text to bound.
        max_length: Maximum length of the result.

    Returns:
        The bounded text, never longer than ``max_length``.
    """
    if len(content) <= max_length:
        return content

    if max_length <= len(TRUNCATION_MARKER):
        # No room for the marker
        return content[: max(0, max_length)]

    limit = max_length - len(TRUNCATION_MARKER)
    cut_point = content.rfind("\n", 0, limit + 1)
    if cut_point == -1 or cut_point < max_length / 2:
        cut_point = limit

    return content[:cut_point] + TRUNCATION_MARKER
