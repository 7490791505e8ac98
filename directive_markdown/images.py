"""Image markup."""

from __future__ import annotations

import html


def _img_tag(src: str, alt: str, title: str | None) -> str:
    title_attr = f' title="{html.escape(title, quote=True)}"' if title else ""
    return (
        f'<img src="{html.escape(src, quote=True)}" alt="{html.escape(alt, quote=True)}"'
        f'{title_attr} loading="lazy" />'
    )


def render_image(alt: str, src: str, title: str | None = None, is_block: bool = False) -> str:
    """Render an image element.

    Block images (the only content of a paragraph) are wrapped in a
    ``<figure>`` with the alt text as caption; inline images are a bare
    lazy-loaded ``<img>``.

    Args:
        alt: Alternative text, also used as the caption of block images.
        src: Image URL.
        title: Optional title attribute; omitted when empty.
        is_block: Whether to render the captioned block form.

    Returns:
        str: Image HTML with every attribute value escaped.

    Examples:
        render_image("A photo", "img.png", is_block=True)
        render_image("icon", "icon.svg", "Icon")
    """
    tag = _img_tag(src, alt, title)
    if not is_block:
        return tag

    caption = f"<figcaption>{html.escape(alt, quote=False)}</figcaption>\n" if alt else ""
    return f"<figure>\n{tag}\n{caption}</figure>\n"
