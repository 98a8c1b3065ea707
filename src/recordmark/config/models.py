"""Configuration model for the conversion engine."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ConverterConfig:
    """Options shared by the forward and reverse pipelines.

    The config is immutable so a single instance can be shared between
    threads converting different documents.

    Attributes:
        root_class: CSS class of the root container element
        allowed_url_schemes: Schemes accepted for external links
        internal_link_prefix: Prefix prepended to internal link hrefs
        references_title: Heading text of the generated references section
        citations_title: Heading text of the generated citations section
        external_links_new_tab: Open external links in a new tab
        front_matter: Parse a leading YAML front matter block
        math: Recognise $inline$ and $$display$$ math
        table_of_contents: Fill ConversionResult.toc
        words_per_minute: Reading speed used for the reading-time estimate
    """
    root_class: str = "recordmark-content"
    allowed_url_schemes: Tuple[str, ...] = ("http", "https", "ftp", "ftps")
    internal_link_prefix: str = ""
    references_title: str = "References"
    citations_title: str = "Citations"
    external_links_new_tab: bool = True
    front_matter: bool = True
    math: bool = True
    table_of_contents: bool = False
    words_per_minute: int = 200


DEFAULT_CONFIG = ConverterConfig()
