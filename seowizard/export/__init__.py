"""Export formatters for finished articles: clean HTML, zip package and WordPress WXR."""

from .article_parser import ArticleFields, EmbeddedImage, parse_article, extract_embedded_images
from .html_exporter import export_clean_html
from .package_exporter import build_package, write_package
from .wxr_exporter import build_wxr, write_wxr

__all__ = [
    "ArticleFields",
    "EmbeddedImage",
    "parse_article",
    "extract_embedded_images",
    "export_clean_html",
    "build_package",
    "write_package",
    "build_wxr",
    "write_wxr",
]
