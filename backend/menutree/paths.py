"""
menutree/paths.py

Path rules for menu entries.

Internal pages use a slash-separated lowercase slug that must be unique per
site. External links (PageType.LINKS) hold a URL and are exempt from the
uniqueness check.
"""
import re
from typing import Iterable, Optional

from menutree.types import MenuNode, PageType, Site

_HANGUL = re.compile(r"[가-힣]")
_VALID_PATH = re.compile(r"^[a-z0-9\-_/]+$")
_URL = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$")


def validate_path(path: str, allow_trailing_slash: bool = False) -> Optional[str]:
    """Return an error message for an invalid path, None when valid."""
    if not path:
        return None
    if _HANGUL.search(path):
        return "Paths cannot contain Korean characters; use a-z, 0-9, '-' and '_'"
    if not _VALID_PATH.match(path):
        return "Paths may only contain lowercase letters, digits, '-', '_' and '/'"
    if "//" in path:
        return "Paths cannot contain consecutive slashes (//)"
    if path.startswith("/"):
        return "Paths cannot start with a slash"
    if not allow_trailing_slash and path.endswith("/"):
        return "Paths cannot end with a slash"
    return None


def validate_external_url(url: str) -> Optional[str]:
    if not url:
        return None
    if url.startswith("http://") or url.startswith("https://") or _URL.match(url):
        return None
    return "Enter a valid URL (e.g. https://docs.example.com/admin/test)"


def normalize_path(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


def find_duplicate_path(
    nodes: Iterable[MenuNode],
    site: Site,
    path: str,
    page_type: PageType,
    exclude_id: Optional[str] = None,
) -> Optional[MenuNode]:
    """First other internal menu of the same site using path, if any."""
    if page_type == PageType.LINKS:
        return None
    wanted = normalize_path(path)
    if not wanted:
        return None
    for node in nodes:
        if node.id == exclude_id or node.site != site or node.page_type == PageType.LINKS:
            continue
        if normalize_path(node.path) == wanted:
            return node
    return None


def label_to_path(label: str) -> str:
    """Slug for an English label: "About Us!" -> "about-us"."""
    if not label:
        return ""
    path = re.sub(r"\s+", "-", label).lower()
    path = re.sub(r"[^a-z0-9\-_]", "", path)
    path = re.sub(r"-+", "-", path)
    return path.strip("-")


def child_path_prefix(parent: Optional[MenuNode]) -> str:
    if parent is None or not parent.path:
        return ""
    return f"{parent.path}/"
