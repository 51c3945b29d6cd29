"""Clean HTML for copy-paste into a CMS editor, with images swapped for placeholders."""

import re

import markdown

from seowizard.models import OutputLanguage
from seowizard.pipeline.placeholders import FEATURED_IMAGE_ALT
from .article_parser import parse_article

IMG_TAG_PATTERN = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
DATA_SRC_PATTERN = re.compile(r"""src=["']data:[^"']*["']""", re.IGNORECASE)
ALT_PATTERN = re.compile(r"""alt="([^"]*)"|alt='([^']*)'""", re.IGNORECASE)

INSERT_LABELS = {
    OutputLanguage.VI: "CHÈN ẢNH",
    OutputLanguage.EN: "INSERT IMAGE"
}


def render_markdown(body: str) -> str:
    return markdown.markdown(body, extensions=["tables", "fenced_code"])


def image_placeholder_block(alt: str, label: str, featured: bool, language: OutputLanguage) -> str:
    background = "#fff7ed" if featured else "#f8fafc"
    border = "#f97316" if featured else "#cbd5e1"
    color = "#c2410c" if featured else "#1e40af"
    return (
        f'<div style="background-color: {background}; border: 2px dashed {border}; padding: 20px; '
        f'text-align: center; margin: 20px 0; border-radius: 8px;">\n'
        f'<p style="font-weight: bold; color: {color}; margin-bottom: 5px;">[{INSERT_LABELS[language]}: {label}]</p>\n'
        f'<p style="color: #64748b; font-size: 0.9em; font-style: italic;">Alt Text: {alt}</p>\n'
        f'</div>'
    )


def export_clean_html(content: str, keyword: str, language: OutputLanguage = OutputLanguage.VI) -> str:
    """Render an article to HTML with embedded images replaced by labelled blocks.

    The featured image is labelled as the thumbnail; illustrations are numbered
    from 1, not counting the featured one.

    Args:
        content: Raw article content
        keyword: Keyword of the article
        language: Language of the placeholder labels

    Returns:
        HTML string
    """
    language = OutputLanguage(language)
    html = render_markdown(parse_article(content, keyword).clean_body)
    image_index = 1

    def _replace(match: re.Match) -> str:
        nonlocal image_index
        tag = match.group(0)
        if not DATA_SRC_PATTERN.search(tag):
            return tag

        alt_match = ALT_PATTERN.search(tag)
        alt = (alt_match.group(1) or alt_match.group(2) or "") if alt_match else ""
        featured = alt == FEATURED_IMAGE_ALT
        if featured:
            label = "FEATURED IMAGE (Thumbnail)"
        else:
            label = f"IMAGE {image_index}"
            image_index += 1
        return image_placeholder_block(alt, label, featured, language)

    return IMG_TAG_PATTERN.sub(_replace, html)
