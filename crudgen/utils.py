# File: crudgen/utils.py
"""
CrudGen - Utility Functions & Helpers
======================================
String transformations (case conversion, English pluralisation), namespace
to path mapping, atomic file I/O and a small profiling timer used
throughout the generation pipeline.

All string-conversion functions are decorated with
``@lru_cache(maxsize=None)``: the same handful of names is converted many
times per run.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import stat
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)

# Irregular nouns common in database schemas (singular → plural).
_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "datum": "data",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "status": "statuses",
    "address": "addresses",
    "leaf": "leaves",
    "life": "lives",
    "knife": "knives",
    "wife": "wives",
    "half": "halves",
    "shelf": "shelves",
    "hero": "heroes",
    "potato": "potatoes",
    "criterion": "criteria",
    "medium": "media",
}

_IRREGULAR_SINGULARS: Dict[str, str] = {v: k for k, v in _IRREGULAR_PLURALS.items()}

# Words whose singular and plural forms are identical.
_UNCOUNTABLE: frozenset = frozenset({
    "equipment", "information", "rice", "money", "species", "series",
    "fish", "sheep", "news", "feedback", "metadata", "software",
})


def _match_case(source: str, target: str) -> str:
    """Give *target* the leading-character case of *source*."""
    if source and source[0].isupper():
        return target[0].upper() + target[1:]
    return target


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("BlogPost")
        'blog_post'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("blog_post")
        'BlogPost'
        >>> to_pascal_case("order-item")
        'OrderItem'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "".join(word.capitalize() for word in words)


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("blog_post")
        'blogPost'
        >>> to_camel_case("BlogPosts")
        'blogPosts'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    first: str = words[0].lower()
    rest: str = "".join(w.capitalize() for w in words[1:])
    return first + rest


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """Convert any string to kebab-case (view folders and URL slugs)."""
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "-".join(w.lower() for w in words)


@functools.lru_cache(maxsize=None)
def to_title_human(name: str) -> str:
    """
    Convert identifier to a space-separated Title Case label.

    Examples:
        >>> to_title_human("BlogPost")
        'Blog Post'
        >>> to_title_human("published_at")
        'Published At'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return " ".join(w.capitalize() for w in words)


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    English pluralisation sufficient for code generation.

    Only the last word of a compound name is inflected.  Words that
    already end in a single ``s`` are treated as plural and returned as-is.
    """
    if not name:
        return ""

    head, last = _split_last_word(name)
    lower: str = last.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR_PLURALS:
        return head + _match_case(last, _IRREGULAR_PLURALS[lower])
    if lower in _IRREGULAR_SINGULARS:
        return name

    # Already plural-looking
    if lower.endswith("s") and not lower.endswith("ss"):
        return name

    if lower.endswith(("sh", "ch", "x", "z", "ss")):
        return name + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"

    return name + "s"


@functools.lru_cache(maxsize=None)
def to_singular(name: str) -> str:
    """
    English singularisation (inverse of :func:`to_plural`).

    Examples:
        >>> to_singular("blog_posts")
        'blog_post'
        >>> to_singular("categories")
        'category'
        >>> to_singular("people")
        'person'
    """
    if not name:
        return ""

    head, last = _split_last_word(name)
    lower: str = last.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR_SINGULARS:
        return head + _match_case(last, _IRREGULAR_SINGULARS[lower])
    if lower in _IRREGULAR_PLURALS:
        return name

    if lower.endswith("ies") and len(lower) > 3:
        return name[:-3] + "y"
    if lower.endswith(("sses", "shes", "ches", "xes", "zes")):
        return name[:-2]
    if lower.endswith(("ss", "us", "is")):
        return name
    if lower.endswith("s"):
        return name[:-1]

    return name


def _split_last_word(name: str) -> Tuple[str, str]:
    """Split ``blog_posts`` into ``('blog_', 'posts')``; ``BlogPost`` into ``('Blog', 'Post')``."""
    match: Optional[re.Match[str]] = re.search(r"([A-Z]?[a-z]+|[A-Z]+|\d+)$", name)
    if match is None:
        return "", name
    return name[: match.start()], match.group(0)


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for LRU cache) of lowercase word strings.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


@functools.lru_cache(maxsize=None)
def column_title(column: str) -> str:
    """Human label for a column: underscores become spaces, words are capitalised."""
    return " ".join(part[:1].upper() + part[1:] for part in column.split("_") if part)


@functools.lru_cache(maxsize=None)
def namespace_to_path(namespace: str) -> str:
    """
    Map a PHP namespace to a directory relative to the application folder.

    The leading ``App`` segment is the application folder itself.

    Examples:
        >>> namespace_to_path("App\\\\Http\\\\Controllers")
        'Http/Controllers'
        >>> namespace_to_path("App")
        ''
    """
    segments: List[str] = [s for s in namespace.split("\\") if s]
    if segments and segments[0] == "App":
        segments = segments[1:]
    return "/".join(segments)


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def _target_mode(path: Path) -> int:
    """Mode for a rewritten file: the existing one, else 0666 minus the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask: int = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_file(path: Path, content: str) -> int:
    """
    Write *content* to *path* atomically.

    Writes to a temporary file in the target directory first, then
    ``os.replace``-s it over the target, so readers never observe a
    partially written file.  An existing target keeps its permission bits.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    fd: int = -1
    tmp_path: str = ""
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        os.chmod(tmp_path, _target_mode(path))
        os.write(fd, encoded)
        os.fsync(fd)
        os.close(fd)
        fd = -1
        os.replace(tmp_path, str(path))
    except BaseException:
        if fd >= 0:
            os.close(fd)
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def read_file(path: Path) -> str:
    """Read a file and return its content as a string."""
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("write views") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_title_human",
    "to_plural",
    "to_singular",
    "column_title",
    "namespace_to_path",
    "ensure_directory",
    "write_file",
    "read_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("crudgen.utils loaded: %d public symbols.", len(__all__))
