"""Rough static site generator.

Rough renders a folder of Markdown project documents with YAML front matter
through Jinja2 templates into a static site.

The document pipeline lives in a few small modules:
- frontmatter: Splits a document into YAML front matter and Markdown body.
- markdown_parser: Parses the body into a stream of structural events.
- inline_images: Unwraps paragraphs that only hold an image.
- html_writer: Serializes the event stream to HTML.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
