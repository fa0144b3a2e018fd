from dataclasses import dataclass
from enum import Enum


class LinkType(Enum):
    HYPERLINK = "hyperlink"
    IMAGE = "image"


@dataclass(frozen=True)
class Link:
    """A reference discovered in a page: an `<a href>` or an `<img src>`."""

    type: LinkType
    target_url: str
    is_external: bool = False

    def __repr__(self):
        return f"<Link {self.type.value} {self.target_url} external={self.is_external}>"
