from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Iterable
from urllib.parse import urlsplit

from markupsafe import Markup, escape

from .coerce import stringify
from .errors import UntrustedValueError

logger = logging.getLogger(__name__)


class TrustCategory(str, Enum):
    """Security-sensitive sinks a rendered value can be destined for."""
    HTML = "html"
    CSS = "css"
    URL = "url"
    RESOURCE_URL = "resource_url"
    JS = "js"


# A value trusted for the key category is also accepted for these categories
_SATISFIES: dict[TrustCategory, set[TrustCategory]] = {
    TrustCategory.RESOURCE_URL: {TrustCategory.RESOURCE_URL, TrustCategory.URL},
}


@dataclass(frozen=True)
class TrustedValue:
    """A value explicitly approved for one trust category."""
    category: TrustCategory
    value: Any


class TrustPolicy:
    """Decide which values may be used in a trusted context.

    - html: Markup and trusted html pass, plain values are escaped
    - resource_url: plain strings must match the allowlist
      ('self' allows relative URLs, other entries are glob patterns)
    - css, url, js: only explicitly trusted values pass
    """

    def __init__(self, resource_url_allowlist: Iterable[str] = ("self",)) -> None:
        self.resource_url_allowlist = list(resource_url_allowlist)

    def trust_as(self, category: TrustCategory | str, value: Any) -> TrustedValue:
        return TrustedValue(category=TrustCategory(category), value=value)

    def unwrap(self, value: Any) -> Any:
        if isinstance(value, TrustedValue):
            return value.value
        return value

    def get_trusted(self, category: TrustCategory | str, value: Any) -> Any:
        category = TrustCategory(category)
        if value is None or value == "":
            return value
        if isinstance(value, TrustedValue):
            if category in _SATISFIES.get(value.category, {value.category}):
                return value.value
            raise UntrustedValueError(category.value, value)
        if category is TrustCategory.HTML:
            if isinstance(value, Markup):
                return value
            return escape(value if isinstance(value, str) else stringify(value))
        if category is TrustCategory.RESOURCE_URL and isinstance(value, str):
            if self.is_resource_url_allowed(value):
                return value
            logger.debug("Blocked resource URL %r", value)
        raise UntrustedValueError(category.value, value)

    def is_resource_url_allowed(self, url: str) -> bool:
        for entry in self.resource_url_allowlist:
            if entry == "self":
                parts = urlsplit(url)
                if not parts.scheme and not parts.netloc:
                    return True
            elif fnmatchcase(url, entry):
                return True
        return False
