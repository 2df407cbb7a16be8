"""Pattern-based text transforms on Confluence storage markup.

The markup is produced by our own renderer and only uses a narrow subset of
storage format, so these transforms work on the text directly instead of
parsing it.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

TOC_MACRO = '<p><ac:structured-macro ac:name="toc" ac:schema-version="1" /></p>'

PREFIX_TEMPLATE = (
    '<ac:structured-macro ac:name="info" ac:schema-version="1"><ac:rich-text-body>\n'
    '<p>{prefix}</p>\n'
    '</ac:rich-text-body></ac:structured-macro>\n'
    '\n'
    '{markup}'
)

# Confluence injects these on every render; they never reflect a content change
DYNAMIC_ID_PATTERN = re.compile(r' (?:ac:macro-)?id="[^"]+"')


def insert_toc(markup: str, section: Optional[str] = None) -> str:
    """Insert a table of contents macro.

    Without a section the macro is prepended. With a section, the content
    below the heading whose text is exactly `section` (up to the next
    heading of the same or a higher level) is replaced by the macro; the
    heading itself is kept. A missing section leaves the markup unchanged.

    Args:
        markup: Storage format markup
        section: Heading text of the section to replace

    Returns:
        Markup with the table of contents inserted
    """
    if not section:
        return f"{TOC_MACRO}\n{markup}"

    heading = re.search(
        r'<h([1-6])(?:\s[^>]*)?>\s*' + re.escape(section) + r'\s*</h\1>',
        markup
    )
    if heading is None:
        logger.warning(f"Section \"{section}\" not found, table of contents not inserted")
        return markup

    level = int(heading.group(1))
    next_heading = re.compile(rf'<h[1-{level}](?:\s[^>]*)?>').search(markup, heading.end())
    section_end = next_heading.start() if next_heading else len(markup)

    return f"{markup[:heading.end()]}\n{TOC_MACRO}\n{markup[section_end:]}"


def add_prefix(markup: str, prefix: Optional[str]) -> str:
    """Put the prefix banner in an info macro above the content."""
    if not prefix:
        return markup
    return PREFIX_TEMPLATE.format(prefix=prefix, markup=markup)


def remove_dynamic_ids(markup: str) -> str:
    """Strip id and ac:macro-id attributes."""
    return DYNAMIC_ID_PATTERN.sub("", markup)


def normalize_markup(markup: str) -> str:
    """Normalize markup for drift comparison.

    Dynamic ids are removed, surrounding whitespace trimmed and the &#39;
    entity (which Confluence stores as a literal quote) decoded.
    """
    return remove_dynamic_ids(markup).strip().replace("&#39;", "'")
