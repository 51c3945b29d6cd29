"""SEO content wizard: bulk keyword-to-article generation and WordPress export."""

__version__ = "0.1.0"
