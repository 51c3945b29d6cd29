#!/usr/bin/env python3
"""
Tests for the article parser module.

These tests verify extraction of SEO fields and the clean body from
semi-structured article text.
"""

import unittest

from seowizard.export.article_parser import parse_article, extract_embedded_images


VI_ARTICLE = """========== META DATA ==========
Meta Title: Giày chạy bộ tốt nhất
Meta Description: Tổng hợp giày chạy bộ đáng mua.
Slug: giay-chay-bo-tot-nhat
=============================

========== NỘI DUNG BÀI VIẾT ==========
**INTRO** Mở đầu.

[BODY] Nội dung chính.
[IMAGE_PROMPT: leftover]
[CONCLUSION] Kết luận.
========== KẾT THÚC BÀI VIẾT ==========
"""


class TestParseArticle(unittest.TestCase):
    """Test cases for parse_article."""

    def test_fields(self):
        fields = parse_article(VI_ARTICLE, "giày chạy bộ")

        self.assertEqual(fields.title, "Giày chạy bộ tốt nhất")
        self.assertEqual(fields.meta_description, "Tổng hợp giày chạy bộ đáng mua.")
        self.assertEqual(fields.slug, "giay-chay-bo-tot-nhat")

    def test_clean_body(self):
        """Test that meta block, delimiters, labels and placeholders are removed."""
        body = parse_article(VI_ARTICLE, "giày chạy bộ").clean_body

        self.assertTrue(body.startswith("Mở đầu."))
        self.assertTrue(body.endswith("Kết luận."))
        for removed in ["META DATA", "Meta Title", "=====", "[BODY]", "**INTRO**", "[CONCLUSION]", "IMAGE_PROMPT"]:
            self.assertNotIn(removed, body)

    def test_missing_fields_use_defaults(self):
        """Test that a bare article still yields usable fields."""
        fields = parse_article("Just a body.", "Best Running Shoes")

        self.assertEqual(fields.title, "Best Running Shoes")
        self.assertEqual(fields.meta_description, "")
        self.assertEqual(fields.slug, "best-running-shoes")
        self.assertEqual(fields.clean_body, "Just a body.")

    def test_empty_field_does_not_swallow_next_line(self):
        fields = parse_article("Meta Title:\nSlug: my-slug\n", "kw")

        self.assertEqual(fields.title, "kw")
        self.assertEqual(fields.slug, "my-slug")

    def test_empty_content(self):
        fields = parse_article("", "kw")
        self.assertEqual((fields.title, fields.slug, fields.clean_body), ("kw", "kw", ""))


class TestExtractEmbeddedImages(unittest.TestCase):
    """Test cases for extract_embedded_images."""

    def test_extracts_data_uri_images_in_order(self):
        body = (
            "![FEATURED_IMAGE](data:image/jpeg;base64,AAA=)\n"
            "![a link](https://example.com/x.png)\n"
            "![Runner](data:image/png;base64,BBB=)\n"
        )

        images = extract_embedded_images(body)

        self.assertEqual([i.alt for i in images], ["FEATURED_IMAGE", "Runner"])
        self.assertEqual(images[0].data_uri, "data:image/jpeg;base64,AAA=")
        self.assertEqual([i.extension for i in images], ["jpg", "png"])
        self.assertEqual(images[1].markdown, "![Runner](data:image/png;base64,BBB=)")

    def test_no_images(self):
        self.assertEqual(extract_embedded_images("No images here."), [])


if __name__ == "__main__":
    unittest.main()
