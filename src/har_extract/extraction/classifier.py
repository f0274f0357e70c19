"""MIME type classification.

Maps a response MIME type to a category directory name and to a file
extension. Both lookups walk an ordered rule table and return the result of
the first rule with a matching substring, so rule order matters: ``font/woff2``
must be tested before ``font/woff``, and fonts before the generic ``text/``
fallback.
"""

from __future__ import annotations

# Each rule is (substrings, result); a rule matches if any substring occurs
# in the lowercased MIME type.
MimeRule = tuple[tuple[str, ...], str]

DEFAULT_CATEGORY = "other"
DEFAULT_EXTENSION = ".bin"

# fmt: off
CATEGORY_RULES: tuple[MimeRule, ...] = (
    (("image/",),                            "images"),
    (("application/json", "text/json"),      "json"),
    (("text/html",),                         "html"),
    (("text/css",),                          "css"),
    (("javascript",),                        "javascript"),
    (("font", "woff"),                       "fonts"),
    (("text/",),                             "text"),
    (("video/",),                            "videos"),
    (("audio/",),                            "audio"),
)

EXTENSION_RULES: tuple[MimeRule, ...] = (
    (("application/json",),                  ".json"),
    (("text/html",),                         ".html"),
    (("text/css",),                          ".css"),
    (("javascript",),                        ".js"),
    (("image/png",),                         ".png"),
    (("image/jpeg", "image/jpg"),            ".jpg"),
    (("image/gif",),                         ".gif"),
    (("image/svg",),                         ".svg"),
    (("image/webp",),                        ".webp"),
    (("text/plain",),                        ".txt"),
    (("application/pdf",),                   ".pdf"),
    (("font/woff2",),                        ".woff2"),
    (("font/woff",),                         ".woff"),
    (("font/ttf",),                          ".ttf"),
)
# fmt: on


def match_rules(mime_type: str, rules: tuple[MimeRule, ...], default: str) -> str:
    """Return the result of the first rule matching ``mime_type``.

    Args:
        mime_type: MIME type string (matched case-insensitively)
        rules: Ordered rule table
        default: Value returned when no rule matches

    Returns:
        Matched result or default
    """
    lowered = (mime_type or "").lower()
    for needles, result in rules:
        if any(needle in lowered for needle in needles):
            return result
    return default


def classify_category(mime_type: str) -> str:
    """Map a MIME type to its category directory name.

    Example:
        >>> classify_category("font/woff2")
        'fonts'
        >>> classify_category("application/x-javascript")
        'javascript'
        >>> classify_category("unknown/type")
        'other'
    """
    return match_rules(mime_type, CATEGORY_RULES, DEFAULT_CATEGORY)


def classify_extension(mime_type: str) -> str:
    """Map a MIME type to a file extension (including the leading dot).

    Example:
        >>> classify_extension("font/woff2")
        '.woff2'
        >>> classify_extension("image/JPEG")
        '.jpg'
        >>> classify_extension("unknown/type")
        '.bin'
    """
    return match_rules(mime_type, EXTENSION_RULES, DEFAULT_EXTENSION)
