"""Field extraction from generated article text.

Model output is semi-structured, so every field has a default and nothing
here raises on a missing or malformed section.
"""

import re
from dataclasses import dataclass
from typing import List

from seowizard.utils import slugify
from seowizard.pipeline.placeholders import IMAGE_PLACEHOLDER_PATTERN

TITLE_PATTERN = re.compile(r"Meta Title:[ \t]*(.*)")
DESCRIPTION_PATTERN = re.compile(r"Meta Description:[ \t]*(.*)")
SLUG_PATTERN = re.compile(r"Slug:[ \t]*(.*)")

META_BLOCK_PATTERN = re.compile(r"========== META DATA ==========\n([\s\S]*?)=============================")

SECTION_DELIMITERS = [
    "========== NỘI DUNG BÀI VIẾT ==========",
    "========== KẾT THÚC BÀI VIẾT ==========",
    "========== ARTICLE CONTENT ==========",
    "========== END OF ARTICLE ==========",
]

LABEL_PATTERN = re.compile(r"\[INTRO\]|\[BODY\]|\[CONCLUSION\]|\*\*INTRO\*\*", re.IGNORECASE)

EMBEDDED_IMAGE_PATTERN = re.compile(r"!\[(.*?)\]\((data:image/([\w.+-]+);base64,[^)\s]*)\)")


@dataclass
class ArticleFields:
    title: str
    meta_description: str
    slug: str
    clean_body: str


@dataclass
class EmbeddedImage:
    """A ``![alt](data:image/...)`` reference inside an article body."""

    markdown: str
    alt: str
    data_uri: str
    subtype: str

    @property
    def extension(self) -> str:
        subtype = self.subtype.lower()
        if subtype == "png":
            return "png"
        if subtype == "webp":
            return "webp"
        return "jpg"


def _field(pattern: re.Pattern, content: str) -> str:
    match = pattern.search(content)
    return match.group(1).strip() if match else ""


def parse_article(content: str, keyword: str) -> ArticleFields:
    """Extract SEO fields and the clean body from raw article content.

    Args:
        content: Raw article markdown as stored in history
        keyword: Keyword the article was generated for, used for defaults

    Returns:
        ArticleFields; title defaults to the keyword, slug to a slug of the
        keyword, description to an empty string
    """
    title = _field(TITLE_PATTERN, content) or keyword
    meta_description = _field(DESCRIPTION_PATTERN, content)
    slug = _field(SLUG_PATTERN, content) or slugify(keyword)

    clean_body = META_BLOCK_PATTERN.sub("", content, count=1).strip()
    for delimiter in SECTION_DELIMITERS:
        clean_body = clean_body.replace(delimiter, "")
    clean_body = LABEL_PATTERN.sub("", clean_body)
    clean_body = IMAGE_PLACEHOLDER_PATTERN.sub("", clean_body)

    return ArticleFields(
        title=title,
        meta_description=meta_description,
        slug=slug,
        clean_body=clean_body.strip()
    )


def extract_embedded_images(body: str) -> List[EmbeddedImage]:
    """Every data-URI image in the body, in order of appearance."""
    return [
        EmbeddedImage(markdown=match.group(0), alt=match.group(1), data_uri=match.group(2), subtype=match.group(3))
        for match in EMBEDDED_IMAGE_PATTERN.finditer(body)
    ]
