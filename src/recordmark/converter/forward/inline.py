"""Inline passes: emphasis, media and links.

All patterns match escaped text. Values lifted into attributes are either
already escaped (they come from the escaped text) or are plain text that is
escaped exactly once here.
"""

import logging
import re
from urllib.parse import quote

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.forward.code import DESTINATION, TITLE
from recordmark.converter.utils import escape_html, is_valid_url
from recordmark.models.metadata import Image

logger = logging.getLogger(__name__)

_SCHEME_PREFIX = re.compile(r'^([A-Za-z][\w+.-]*):')


def _delimited(delimiter: str) -> re.Pattern:
    """Pattern for text wrapped in delimiter, hugging non-space text outside words.

    The closing delimiter may be followed by another delimiter character so
    ``**a *b***`` resolves the inner italic first, then the bold.
    """
    mark = re.escape(delimiter[0])
    fence = re.escape(delimiter)
    return re.compile(
        rf'(?<![\w{mark}]){fence}(?=\S)([^{mark}\n]+?)(?<=\S){fence}(?!\w)'
    )


class EmphasisPass(ForwardPass):
    """Bold, italic, strikethrough and highlight.

    The combined ``***`` form is tried before ``**`` and ``*``. Rules are
    re-applied until the text is stable so ``**a *b* c**`` nests properly.
    """

    name = "emphasis"

    RULES = (
        (_delimited('***'), r'<strong><em>\1</em></strong>'),
        (_delimited('**'), r'<strong>\1</strong>'),
        (_delimited('*'), r'<em>\1</em>'),
        (_delimited('~~'), r'<del>\1</del>'),
        (_delimited('=='), r'<mark>\1</mark>'),
    )

    MAX_ROUNDS = 4

    def apply(self, text: str, ctx: ForwardContext) -> str:
        for _ in range(self.MAX_ROUNDS):
            updated = text
            for pattern, replacement in self.RULES:
                updated = pattern.sub(replacement, updated)
            if updated == text:
                break
            text = updated
        return text


class MediaPass(ForwardPass):
    """Images, video, audio and YouTube embeds.

    Runs before the link pass because ``![alt](src)`` would otherwise be read
    as a link preceded by ``!``.
    """

    name = "media"

    IMAGE_PATTERN = re.compile(
        r'!\[([^\[\]\n]*)\]\((' + DESTINATION + r')(?:[ \t]+&quot;(' + TITLE + r')&quot;)?\)(?:\{(\d+)x(\d+)\})?'
    )
    VIDEO_PATTERN = re.compile(r'@\[(video|audio)\]\((' + DESTINATION + r')\)')
    YOUTUBE_PATTERN = re.compile(r'@\[youtube\]\((' + DESTINATION + r')\)')
    VIDEO_ID_PATTERN = re.compile(r'^[\w-]+$')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        text = self.IMAGE_PATTERN.sub(lambda m: self._image(m, ctx), text)
        text = self.VIDEO_PATTERN.sub(lambda m: self._player(m, ctx), text)
        text = self.YOUTUBE_PATTERN.sub(lambda m: self._youtube(m, ctx), text)
        return text

    def _image(self, match, ctx: ForwardContext) -> str:
        src = match.group(2)
        if not _safe_source(ctx.source_text(src), ctx):
            ctx.warn(f"Image source {ctx.source_text(src)!r} uses a disallowed scheme", needle=ctx.source_text(src))
            return match.group(0)

        alt = ctx.plain(match.group(1))
        title = match.group(3) or ""
        ctx.metadata.images.append(Image(ctx.source_text(src), alt, ctx.plain(title)))

        attrs = f'src="{src}" alt="{escape_html(alt)}"'
        if match.group(4):
            attrs += f' width="{match.group(4)}" height="{match.group(5)}"'
        if not title:
            return f'<img {attrs}>'
        return f'<figure><img {attrs} title="{escape_html(ctx.plain(title))}"><figcaption>{title}</figcaption></figure>'

    def _player(self, match, ctx: ForwardContext) -> str:
        kind, src = match.group(1), match.group(2)
        raw = ctx.source_text(src)
        if not _safe_source(raw, ctx):
            ctx.warn(f"Media source {raw!r} uses a disallowed scheme", needle=raw)
            return match.group(0)
        if kind == "video":
            ctx.metadata.videos.append(raw)
        else:
            ctx.metadata.audio.append(raw)
        return f'<{kind} src="{src}" controls></{kind}>'

    def _youtube(self, match, ctx: ForwardContext) -> str:
        video_id = ctx.source_text(match.group(1))
        if not self.VIDEO_ID_PATTERN.match(video_id):
            ctx.warn(f"Invalid YouTube id {video_id!r}; left as text", needle=video_id)
            return match.group(0)
        ctx.metadata.embeds.append(video_id)
        return (
            f'<div class="video-embed"><iframe src="https://www.youtube.com/embed/{video_id}" '
            f'data-video-id="{video_id}" allowfullscreen></iframe></div>'
        )


def _safe_source(src: str, ctx: ForwardContext) -> bool:
    """Relative sources are fine; absolute ones need an allowed scheme."""
    match = _SCHEME_PREFIX.match(src)
    if not match:
        return True
    return match.group(1).lower() in ctx.config.allowed_url_schemes and is_valid_url(
        src, ctx.config.allowed_url_schemes
    )


class ExternalLinkPass(ForwardPass):
    """``[text](url "title")`` and ``<url>`` autolinks.

    Only URLs that pass is_valid_url become anchors; anything else stays as
    literal text and raises a warning.
    """

    name = "external_links"

    LINK_PATTERN = re.compile(
        r'(?<!!)\[([^\[\]\n]+)\]\((' + DESTINATION + r')(?:[ \t]+&quot;(' + TITLE + r')&quot;)?\)'
    )
    AUTOLINK_PATTERN = re.compile(r'&lt;([A-Za-z][\w+.-]*://(?:(?!&[lg]t;)\S)+)&gt;')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        text = self.LINK_PATTERN.sub(lambda m: self._link(m.group(0), m.group(2), m.group(1), m.group(3), ctx), text)
        text = self.AUTOLINK_PATTERN.sub(lambda m: self._link(m.group(0), m.group(1), m.group(1), None, ctx), text)
        return text

    def _link(self, original: str, url: str, label: str, title, ctx: ForwardContext) -> str:
        raw = ctx.source_text(url)
        if not is_valid_url(raw, ctx.config.allowed_url_schemes):
            ctx.warn(f"Invalid link URL {raw!r}; left as text", needle=raw)
            return original

        ctx.metadata.links.append(raw)
        attrs = f'href="{url}" class="external"'
        if title:
            attrs += f' title="{escape_html(ctx.plain(title))}"'
        if ctx.config.external_links_new_tab:
            attrs += ' target="_blank" rel="noopener noreferrer"'
        return f'<a {attrs}>{label}</a>'


class InternalLinkPass(ForwardPass):
    """``[[Page]]`` and ``[[Page|Text]]`` wiki links."""

    name = "internal_links"

    WIKI_LINK_PATTERN = re.compile(r'\[\[([^\[\]|\n]+)(?:\|([^\[\]\n]+))?\]\]')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        def replace(match):
            page = ctx.plain(match.group(1)).strip()
            if not page:
                return match.group(0)
            ctx.metadata.links.append(page)
            href = escape_html(ctx.config.internal_link_prefix + quote(page, safe="/#"))
            label = match.group(2) or match.group(1)
            return f'<a href="{href}" class="internal" data-page="{escape_html(page)}">{label.strip()}</a>'

        return self.WIKI_LINK_PATTERN.sub(replace, text)
