"""Markdown converter using Pandoc.

This module converts markdown to HTML with Pandoc and post-processes the
result into Confluence storage format: local images become attachment
references and fenced code becomes the Confluence code macro.
"""

import html
import re
import subprocess
from urllib.parse import unquote

from ..confluence_client.errors import ConversionError

# Pandoc's implicit figures wrap lone images in <figure>; Confluence wants plain images
PANDOC_READER = "markdown-implicit_figures"

IMG_PATTERN = re.compile(r'<img\s+([^>]*?)\s*/?>')
ATTRIBUTE_PATTERN = re.compile(r'([\w:-]+)="([^"]*)"')
CODE_BLOCK_PATTERN = re.compile(
    r'<pre(?: class="([^"]*)")?[^>]*>\s*<code(?: class="([^"]*)")?[^>]*>(.*?)</code>\s*</pre>',
    re.DOTALL
)


class MarkdownConverter:
    """Converts markdown to Confluence storage format (XHTML).

    Uses Pandoc for markdown→HTML conversion, then rewrites the HTML
    constructs Confluence stores differently.
    """

    def __init__(self):
        """Initialize MarkdownConverter and verify Pandoc is available.

        Raises:
            ConversionError: If Pandoc is not found on system PATH
        """
        if not self._pandoc_installed():
            raise ConversionError(
                "Pandoc not found. Install: brew install pandoc (macOS) or "
                "apt-get install pandoc (Linux) or download from "
                "https://pandoc.org/installing.html"
            )

    def markdown_to_xhtml(self, markdown: str) -> str:
        """Convert markdown to Confluence storage format.

        Args:
            markdown: Markdown string

        Returns:
            XHTML string suitable for Confluence storage format

        Raises:
            ConversionError: If conversion fails or times out
        """
        if not markdown:
            return ""

        try:
            result = subprocess.run(
                ["pandoc", "-f", PANDOC_READER, "-t", "html", "--no-highlight"],
                input=markdown,
                text=True,
                capture_output=True,
                check=True,
                timeout=10
            )
        except subprocess.CalledProcessError as e:
            raise ConversionError(f"Pandoc conversion failed: {e.stderr}")
        except subprocess.TimeoutExpired:
            raise ConversionError("Pandoc conversion timed out (>10s)")

        xhtml = self._convert_images(result.stdout)
        xhtml = self._convert_code_blocks(xhtml)
        return xhtml

    def _convert_images(self, xhtml: str) -> str:
        """Convert <img> tags to Confluence image macros.

        Relative sources become attachment references (uploaded with the
        page); absolute URLs become URL references.

        Example:
            >>> converter._convert_images('<img src="img/a.png" alt="A" />')
            '<ac:image ac:alt="A"><ri:attachment ri:filename="img/a.png" /></ac:image>'
        """
        def convert_img(match):
            attributes = dict(ATTRIBUTE_PATTERN.findall(match.group(1)))
            src = html.unescape(attributes.get('src', ''))
            alt = attributes.get('alt', '')
            alt_attr = f' ac:alt="{alt}"' if alt else ''

            if re.match(r'^[a-z][a-z0-9+.-]*://', src, re.IGNORECASE) or src.startswith('//'):
                resource = f'<ri:url ri:value="{html.escape(src, quote=True)}" />'
            else:
                filename = html.escape(unquote(src), quote=True)
                resource = f'<ri:attachment ri:filename="{filename}" />'
            return f'<ac:image{alt_attr}>{resource}</ac:image>'

        return IMG_PATTERN.sub(convert_img, xhtml)

    def _convert_code_blocks(self, xhtml: str) -> str:
        """Convert <pre><code> blocks to the Confluence code macro.

        The code body is unescaped into a CDATA section; a "]]>" inside the
        code is split across two CDATA sections.
        """
        def convert_block(match):
            classes = f"{match.group(1) or ''} {match.group(2) or ''}".split()
            language = next(
                (c.removeprefix('language-') for c in classes if c != 'sourceCode'),
                None
            )
            code = html.unescape(match.group(3)).replace(']]>', ']]]]><![CDATA[>')

            parameter = (
                f'<ac:parameter ac:name="language">{language}</ac:parameter>'
                if language else ''
            )
            return (
                f'<ac:structured-macro ac:name="code" ac:schema-version="1">'
                f'{parameter}'
                f'<ac:plain-text-body><![CDATA[{code}]]></ac:plain-text-body>'
                f'</ac:structured-macro>'
            )

        return CODE_BLOCK_PATTERN.sub(convert_block, xhtml)

    def _pandoc_installed(self) -> bool:
        """Check if Pandoc is installed on system PATH.

        Returns:
            True if Pandoc is available, False otherwise
        """
        try:
            result = subprocess.run(
                ["which", "pandoc"],
                capture_output=True,
                timeout=5
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
