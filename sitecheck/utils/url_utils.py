import logging
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urldefrag, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

FOLLOWABLE_SCHEMES = ("http", "https")


def host_key(url: str) -> Optional[Tuple[Optional[str], Optional[int]]]:
    """Return (hostname, port) of an absolute URL, or None if it has no host."""
    parts = urlsplit(url)
    if not parts.netloc:
        return None
    return (parts.hostname, parts.port)


def is_absolute(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme and parts.netloc)


def is_followable(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in FOLLOWABLE_SCHEMES and bool(parts.netloc)


def strip_fragment(url: str) -> str:
    return urldefrag(url)[0]


def rewrite_url_host(urls: Iterable[str], host: str) -> List[str]:
    """Replace the host of every URL in `urls` with `host`.

    Entries that cannot be parsed, or have no scheme or host, are dropped.
    """
    rewritten = []
    for url in urls:
        try:
            parts = urlsplit(url)
            if not parts.scheme or not parts.netloc:
                raise ValueError("missing scheme or host")
            rewritten.append(urlunsplit(parts._replace(netloc=host)))
        except ValueError as e:
            logger.error("Dropping invalid URL %r: %s", url, e)
    return rewritten
