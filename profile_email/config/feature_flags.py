"""
Feature flags - Per-citizen rollout of unique e-mail enforcement.
"""

from collections.abc import Callable, Iterable
from enum import Enum


class FeatureFlag(str, Enum):
    """
    Rollout stage of a feature.

    - NONE: disabled for everybody
    - BETA: enabled only for the listed beta users
    - ALL: enabled for everybody
    """

    NONE = "NONE"
    BETA = "BETA"
    ALL = "ALL"


def is_user_eligible(flag: FeatureFlag, beta_users: Iterable[str]) -> Callable[[str], bool]:
    """Build a predicate telling whether a fiscal code gets the feature."""
    beta = frozenset(beta_users)

    def predicate(fiscal_code: str) -> bool:
        if flag == FeatureFlag.ALL:
            return True
        if flag == FeatureFlag.BETA:
            return fiscal_code in beta
        return False

    return predicate
