"""Reverse passes for media elements and links."""

import re
from urllib.parse import unquote

from recordmark.converter.reverse.base import ReverseContext, ReversePass, block, parse_attributes
from recordmark.converter.utils import escape_html, is_valid_url, strip_tags, unescape_html

_WHITESPACE_RUN = re.compile(r'\s+')
_BACKSLASH_ESCAPE = re.compile(r'\\(.)')


def _image_markup(attrs, title: str = "") -> str:
    markup = f"![{attrs.get('alt', '')}]({attrs.get('src', '')}"
    title = title or attrs.get('title', '')
    if title:
        markup += f' "{title}"'
    markup += ")"
    width, height = attrs.get('width', ''), attrs.get('height', '')
    if width.isdigit() and height.isdigit():
        markup += f"{{{width}x{height}}}"
    return markup


def _unescape_markup(text: str) -> str:
    return _BACKSLASH_ESCAPE.sub(r'\1', text)


class ImagePass(ReversePass):
    """Figures, images, video and audio players and YouTube embeds."""

    name = "images"

    FIGURE_PATTERN = re.compile(r'<figure\b[^>]*>(.*?)</figure>', re.DOTALL | re.IGNORECASE)
    CAPTION_PATTERN = re.compile(r'<figcaption\b[^>]*>(.*?)</figcaption>', re.DOTALL | re.IGNORECASE)
    IMG_PATTERN = re.compile(r'<img\b([^>]*?)/?>', re.IGNORECASE)
    PLAYER_PATTERN = re.compile(r'<(video|audio)\b([^>]*)>(.*?)</\1>', re.DOTALL | re.IGNORECASE)
    SOURCE_PATTERN = re.compile(r'<source\b([^>]*?)/?>', re.IGNORECASE)
    EMBED_PATTERN = re.compile(
        r'(?:<div\b[^>]*class="video-embed"[^>]*>\s*)?'
        r'<iframe\b[^>]*src="(?:https?:)?//(?:www\.)?youtube(?:-nocookie)?\.com/embed/([\w-]+)[^"]*"[^>]*>\s*</iframe>'
        r'(?:\s*</div>)?',
        re.IGNORECASE
    )

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = self.FIGURE_PATTERN.sub(self._figure, text)
        text = self.IMG_PATTERN.sub(lambda m: _image_markup(parse_attributes(m.group(1))), text)
        text = self.PLAYER_PATTERN.sub(self._player, text)
        return self.EMBED_PATTERN.sub(lambda m: block(f"@[youtube]({m.group(1)})"), text)

    def _figure(self, match) -> str:
        inner = match.group(1)
        image = self.IMG_PATTERN.search(inner)
        if image is None:
            return match.group(0)
        caption = self.CAPTION_PATTERN.search(inner)
        title = _WHITESPACE_RUN.sub(' ', strip_tags(caption.group(1))).strip() if caption else ""
        return block(_image_markup(parse_attributes(image.group(1)), title))

    def _player(self, match) -> str:
        src = parse_attributes(match.group(2)).get('src', '')
        if not src:
            source = self.SOURCE_PATTERN.search(match.group(3))
            src = parse_attributes(source.group(1)).get('src', '') if source else ''
        if not src:
            return match.group(0)
        return block(f"@[{match.group(1).lower()}]({src})")


class LinkPass(ReversePass):
    """Internal links become ``[[Page]]``; the rest ``[text](url "title")`` or ``<url>``."""

    name = "links"

    ANCHOR_PATTERN = re.compile(r'<a\b([^>]*)>(.*?)</a>', re.DOTALL | re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        return self.ANCHOR_PATTERN.sub(lambda m: self._link(m, ctx), text)

    def _link(self, match, ctx: ReverseContext) -> str:
        attrs = parse_attributes(match.group(1))
        label = _WHITESPACE_RUN.sub(' ', match.group(2)).strip()
        href = attrs.get('href', '')
        classes = attrs.get('class', '').split()

        if 'data-page' in attrs or 'internal' in classes:
            page = attrs.get('data-page') or self._page_from_href(href, ctx)
            if not page:
                return label
            if not label or unescape_html(strip_tags(_unescape_markup(label))) == unescape_html(page):
                return f"[[{page}]]"
            return f"[[{page}|{label}]]"

        if not href:
            return label
        if not label:
            label = href
        if _unescape_markup(label) == href and is_valid_url(unescape_html(href), ctx.config.allowed_url_schemes):
            return f"&lt;{href}&gt;"
        title = attrs.get('title', '')
        suffix = f' "{title}"' if title else ''
        return f"[{label}]({href}{suffix})"

    @staticmethod
    def _page_from_href(href: str, ctx: ReverseContext) -> str:
        href = unescape_html(href)
        prefix = ctx.config.internal_link_prefix
        if prefix and href.startswith(prefix):
            href = href[len(prefix):]
        return escape_html(unquote(href))
