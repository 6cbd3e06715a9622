"""
Markdown Utilities

Helpers for handling hyperlinks in rendered markdown. PDF output cannot carry
clickable links reliably, so links are replaced by numbered superscripts and the
URLs are listed separately.
"""

import re
from typing import List, Tuple

# [text](url) where text has no closing bracket and url has no whitespace
MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")


def sanitize_links(text: str, links: List[str]) -> Tuple[str, List[str]]:
    """
    Replace markdown links with superscript footnote numbers.

    Numbering continues from the links already collected, so calling this once per
    fragment keeps a single sequence across the whole document. A URL that was
    already collected reuses its number, so sanitizing the same fragment twice
    gives the same text and collects nothing new.

    Args:
        text: Markdown text possibly containing [text](url) links
        links: URLs collected so far (not modified)

    Returns:
        Tuple of (text with links replaced, updated list of URLs)

    Example:
        >>> sanitize_links("See [my site](https://x.org)", [])
        ('See my site<sup>1</sup>', ['https://x.org'])
    """
    collected = list(links)

    def _replace(match: re.Match) -> str:
        url = match.group(2)
        if url not in collected:
            collected.append(url)
        return f"{match.group(1)}<sup>{collected.index(url) + 1}</sup>"

    if not text:
        return text, collected

    return MARKDOWN_LINK.sub(_replace, text), collected


def format_links_markdown(links: List[str]) -> str:
    """
    Format collected URLs as a numbered markdown list.

    Args:
        links: URLs in footnote order

    Returns:
        Numbered list ("1. url" per line), or "" if there are no links
    """
    if not links:
        return ""
    return "\n".join(f"{i}. {url}" for i, url in enumerate(links, 1)) + "\n"
