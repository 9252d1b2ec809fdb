"""HTML to Markdown conversion."""

from html2text import HTML2Text


def html_to_markdown(html: str, base_url: str = "") -> str:
    """Convert an HTML fragment to Markdown.

    Args:
        html: HTML to convert.
        base_url: URL relative links and images are resolved against.

    Returns:
        Markdown text without trailing whitespace.
    """
    if not html:
        return ""

    converter = HTML2Text(baseurl=base_url)
    converter.body_width = 0  # no hard wrapping
    converter.ignore_links = False
    converter.ignore_images = False
    converter.ignore_emphasis = False
    converter.unicode_snob = True
    return converter.handle(html).strip()
