"""URL pattern matching for mock rules.

Patterns use two wildcards:
- ``**`` matches any sequence of characters, including ``/``
- ``*`` matches any sequence of characters except ``/``

Every other character matches itself. Regex metacharacters such as ``.``,
``?``, ``(`` or ``+`` are escaped, so ``api.example.com`` only matches a
literal dot. Matching is a search anywhere in the URL, not a full match:
``**/users/*`` matches ``https://x/a/users/42`` as well as
``https://x/users/42/posts``.
"""

import re
from functools import lru_cache
from typing import Pattern

_DOUBLE_STAR = "**"
_SINGLE_STAR = "*"


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a wildcard URL pattern into a regular expression.

    Args:
        pattern: URL pattern with ``*`` / ``**`` wildcards

    Returns:
        Compiled regex; an empty pattern compiles to an empty regex that
        matches every URL.
    """
    translated = []
    for i, chunk in enumerate(pattern.split(_DOUBLE_STAR)):
        if i > 0:
            translated.append(".*")
        translated.append(
            "[^/]*".join(re.escape(literal) for literal in chunk.split(_SINGLE_STAR))
        )
    return re.compile("".join(translated))


def url_matches(url: str, pattern: str) -> bool:
    """Check whether a URL matches a wildcard pattern anywhere in the string.

    Args:
        url: Request URL
        pattern: URL pattern with ``*`` / ``**`` wildcards

    Returns:
        True if the pattern matches

    Example:
        url_matches("https://x/a/b/users/42", "**/users/*")  # True
        url_matches("https://x/users", "**/users/*")  # False
    """
    return compile_pattern(pattern).search(url) is not None
