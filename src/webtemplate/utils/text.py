"""Small string utilities."""

from __future__ import annotations


def multi_replace(text: str, *pairs: str) -> str:
    """Replace several needles in one left-to-right pass.

    Arguments after ``text`` are alternating ``needle, replacement`` pairs.
    At each position the needle that occurs earliest wins (ties go to the
    pair listed first), and replaced text is never rescanned, so
    replacements cannot cascade into each other.

    Example:
        >>> multi_replace("a<b>", "<", "&lt;", ">", "&gt;")
        'a&lt;b&gt;'
        >>> multi_replace("ab", "a", "b", "b", "a")
        'ba'

    Raises:
        ValueError: If the pairs are unbalanced or a needle is empty.
    """
    if not pairs:
        return text
    if len(pairs) % 2:
        raise ValueError("multi_replace() expects needle/replacement pairs")
    needles = pairs[0::2]
    replacements = pairs[1::2]
    if any(not needle for needle in needles):
        raise ValueError("multi_replace() needles must be non-empty")

    out: list[str] = []
    pos = 0
    while pos < len(text):
        best_idx = -1
        best_pair = -1
        for i, needle in enumerate(needles):
            idx = text.find(needle, pos)
            if idx != -1 and (best_idx == -1 or idx < best_idx):
                best_idx = idx
                best_pair = i
        if best_pair == -1:
            out.append(text[pos:])
            break
        out.append(text[pos:best_idx])
        out.append(replacements[best_pair])
        pos = best_idx + len(needles[best_pair])
    return "".join(out)
