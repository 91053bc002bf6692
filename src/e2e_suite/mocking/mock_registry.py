"""Registry of mock rules keyed by ``METHOD:urlPattern``."""

import logging
from typing import Dict, Iterator, List, Optional

from e2e_suite.mocking.url_matcher import url_matches
from e2e_suite.models.mock_models import MockRule

logger = logging.getLogger(__name__)


class MockRegistry:
    """Store and resolve mock rules.

    Registering the same method and pattern again replaces the earlier rule
    in place. Resolution walks rules in registration order and returns the
    first whose method is equal and whose pattern matches the URL, so more
    specific patterns that overlap a broader one must be registered first.
    """

    def __init__(self):
        self._rules: Dict[str, MockRule] = {}

    def register(self, rule: MockRule) -> None:
        """Insert or overwrite a rule."""
        replaced = rule.key in self._rules
        self._rules[rule.key] = rule
        logger.debug(f"{'Replaced' if replaced else 'Registered'} mock {rule.key}")

    def resolve(self, method: str, url: str) -> Optional[MockRule]:
        """Find the first rule matching a request.

        Args:
            method: HTTP method of the request
            url: Request URL

        Returns:
            The matching rule, or None when nothing matches
        """
        for rule in self._rules.values():
            if rule.method == method and url_matches(url, rule.url_pattern):
                return rule
        return None

    def get(self, key: str) -> Optional[MockRule]:
        return self._rules.get(key)

    def rules(self) -> List[MockRule]:
        return list(self._rules.values())

    def clear(self) -> None:
        self._rules.clear()

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[MockRule]:
        return iter(list(self._rules.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._rules
