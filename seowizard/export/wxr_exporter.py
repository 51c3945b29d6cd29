"""WordPress eXtended RSS (WXR) export.

Produces one post item followed by one attachment item per embedded image.
The featured image becomes the post thumbnail and is removed from the body;
the other images stay in the body as image blocks pointing at their attachment.
"""

import html
import random
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from seowizard.config import get_export_config
from seowizard.models import OutputLanguage
from seowizard.pipeline.image_processor import compress_if_needed
from seowizard.pipeline.placeholders import FEATURED_IMAGE_ALT
from seowizard.utils import sanitize_filename
from .article_parser import parse_article, extract_embedded_images
from .html_exporter import render_markdown


def cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + (text or "").replace("]]>", "]]]]><![CDATA[>") + "]]>"


def category_nicename(category: str) -> str:
    return "-".join(category.lower().split())


def _postmeta(key: str, value: str) -> str:
    return (
        "\t\t<wp:postmeta>\n"
        f"\t\t\t<wp:meta_key>{key}</wp:meta_key>\n"
        f"\t\t\t<wp:meta_value>{cdata(value)}</wp:meta_value>\n"
        "\t\t</wp:postmeta>\n"
    )


def _extension(data_uri: str) -> str:
    mime = data_uri[5:data_uri.find(";")] if data_uri.startswith("data:") else ""
    if mime == "image/png":
        return "png"
    if mime == "image/webp":
        return "webp"
    return "jpg"


def _image_block(attachment_id: int, data_uri: str, alt: str) -> str:
    alt_attr = html.escape(alt, quote=True)
    return (
        f'\n<!-- wp:image {{"id":{attachment_id}}} -->\n'
        f'<figure class="wp-block-image"><img src="{data_uri}" alt="{alt_attr}" class="wp-image-{attachment_id}"/>'
        f'<figcaption>{html.escape(alt)}</figcaption></figure>\n'
        f'<!-- /wp:image -->'
    )


def _attachment_item(attachment_id: int, post_id: int, data_uri: str, alt: str,
                     author: str, pub_date: str, post_date: str, now: datetime) -> str:
    filename = f"image-{attachment_id}.{_extension(data_uri)}"
    return (
        "\t<item>\n"
        f"\t\t<title>{cdata(alt)}</title>\n"
        "\t\t<link></link>\n"
        f"\t\t<pubDate>{pub_date}</pubDate>\n"
        f"\t\t<dc:creator>{cdata(author)}</dc:creator>\n"
        '\t\t<guid isPermaLink="false"></guid>\n'
        "\t\t<description></description>\n"
        f"\t\t<content:encoded>{cdata(data_uri)}</content:encoded>\n"
        f"\t\t<excerpt:encoded>{cdata(alt)}</excerpt:encoded>\n"
        f"\t\t<wp:post_id>{attachment_id}</wp:post_id>\n"
        f"\t\t<wp:post_date>{post_date}</wp:post_date>\n"
        "\t\t<wp:comment_status>open</wp:comment_status>\n"
        "\t\t<wp:ping_status>open</wp:ping_status>\n"
        f"\t\t<wp:post_name>{cdata(f'image-{attachment_id}')}</wp:post_name>\n"
        "\t\t<wp:status>inherit</wp:status>\n"
        f"\t\t<wp:post_parent>{post_id}</wp:post_parent>\n"
        "\t\t<wp:menu_order>0</wp:menu_order>\n"
        "\t\t<wp:post_type>attachment</wp:post_type>\n"
        "\t\t<wp:post_password></wp:post_password>\n"
        "\t\t<wp:is_sticky>0</wp:is_sticky>\n"
        f"\t\t<wp:attachment_url>{cdata(filename)}</wp:attachment_url>\n"
        + _postmeta("_wp_attached_file", f"{now:%Y/%m}/{filename}")
        + _postmeta("_wp_attachment_image_alt", alt)
        + "\t</item>\n"
    )


def build_wxr(content: str, keyword: str, category: Optional[str] = None,
              language: OutputLanguage = OutputLanguage.VI, post_id: Optional[int] = None,
              now: Optional[datetime] = None, compress: Optional[Callable[[str], str]] = None) -> str:
    """Build a WXR document for one article.

    Args:
        content: Raw article content
        keyword: Keyword of the article
        category: Post category; blank falls back to "General"
        language: Channel language
        post_id: Post id; a random one is picked when omitted. Attachments get
            post_id + 1, post_id + 2, ... in order of appearance
        now: Timestamp used for every date in the document
        compress: Recompression applied to each image data URI

    Returns:
        The XML document as a string
    """
    config = get_export_config()
    if category is None:
        category = config["default_category"]
    category = (category or "").strip() or "General"
    author = config["author"]
    compress = compress or (lambda uri: compress_if_needed(uri, config["recompress_threshold"]))

    fields = parse_article(content, keyword)
    post_id = post_id if post_id is not None else random.randint(1000, 100999)
    now = now or datetime.now(timezone.utc)
    pub_date = format_datetime(now)
    post_date = now.strftime("%Y-%m-%d %H:%M:%S")

    body = fields.clean_body
    attachments: List[str] = []
    featured_id = None

    for i, image in enumerate(extract_embedded_images(fields.clean_body)):
        attachment_id = post_id + i + 1
        data_uri = compress(image.data_uri)

        # Every copy of an identical image is rewritten on its first match
        if image.alt == FEATURED_IMAGE_ALT:
            featured_id = attachment_id
            body = body.replace(image.markdown, "")
        else:
            body = body.replace(image.markdown, _image_block(attachment_id, data_uri, image.alt))

        attachments.append(
            _attachment_item(attachment_id, post_id, data_uri, image.alt, author, pub_date, post_date, now)
        )

    html_content = render_markdown(body)

    thumbnail_meta = _postmeta("_thumbnail_id", str(featured_id)) if featured_id is not None else ""
    language = OutputLanguage(language)

    xml = (
        '<?xml version="1.0" encoding="UTF-8" ?>\n'
        '<rss version="2.0"\n'
        '\txmlns:excerpt="http://wordpress.org/export/1.2/excerpt/"\n'
        '\txmlns:content="http://purl.org/rss/1.0/modules/content/"\n'
        '\txmlns:wfw="http://wellformedweb.org/CommentAPI/"\n'
        '\txmlns:dc="http://purl.org/dc/elements/1.1/"\n'
        '\txmlns:wp="http://wordpress.org/export/1.2/"\n'
        '>\n'
        '<channel>\n'
        f"\t<title>{html.escape(config['channel_title'])}</title>\n"
        f"\t<pubDate>{pub_date}</pubDate>\n"
        f"\t<language>{language.value}</language>\n"
        "\t<wp:wxr_version>1.2</wp:wxr_version>\n"
        "\t<item>\n"
        f"\t\t<title>{cdata(fields.title)}</title>\n"
        "\t\t<link></link>\n"
        f"\t\t<pubDate>{pub_date}</pubDate>\n"
        f"\t\t<dc:creator>{cdata(author)}</dc:creator>\n"
        '\t\t<guid isPermaLink="false"></guid>\n'
        "\t\t<description></description>\n"
        f"\t\t<content:encoded>{cdata(html_content)}</content:encoded>\n"
        f"\t\t<excerpt:encoded>{cdata('')}</excerpt:encoded>\n"
        f"\t\t<wp:post_id>{post_id}</wp:post_id>\n"
        f"\t\t<wp:post_date>{post_date}</wp:post_date>\n"
        "\t\t<wp:comment_status>open</wp:comment_status>\n"
        "\t\t<wp:ping_status>open</wp:ping_status>\n"
        f"\t\t<wp:post_name>{cdata(fields.slug)}</wp:post_name>\n"
        "\t\t<wp:status>draft</wp:status>\n"
        "\t\t<wp:post_parent>0</wp:post_parent>\n"
        "\t\t<wp:menu_order>0</wp:menu_order>\n"
        "\t\t<wp:post_type>post</wp:post_type>\n"
        "\t\t<wp:post_password></wp:post_password>\n"
        "\t\t<wp:is_sticky>0</wp:is_sticky>\n"
        f'\t\t<category domain="category" nicename="{html.escape(category_nicename(category), quote=True)}">{cdata(category)}</category>\n'
        + thumbnail_meta
        + "\t\t<!-- SEO METADATA -->\n"
        + _postmeta("_yoast_wpseo_title", fields.title)
        + _postmeta("_yoast_wpseo_metadesc", fields.meta_description)
        + _postmeta("rank_math_title", fields.title)
        + _postmeta("rank_math_description", fields.meta_description)
        + "\t</item>\n"
        + "".join(attachments)
        + "</channel>\n"
        "</rss>\n"
    )

    logger.info(f"Built WXR export for '{keyword}' with {len(attachments)} attachment(s)")
    return xml


def write_wxr(content: str, keyword: str, output_dir: Path, **kwargs) -> Path:
    """Write the WXR document to ``<slug>.xml`` in output_dir and return its path."""
    slug = parse_article(content, keyword).slug
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{sanitize_filename(slug or 'article')}.xml"
    path.write_text(build_wxr(content, keyword, **kwargs), encoding="utf-8")
    logger.info(f"WXR export saved to {path}")
    return path
