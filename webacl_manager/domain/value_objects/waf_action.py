"""Action value objects used by Web ACLs and their rule bindings."""
from enum import Enum


class WafActionType(str, Enum):
    """Action applied to a matching request (or to all unmatched ones, as a default)."""

    ALLOW = "ALLOW"
    BLOCK = "BLOCK"
    COUNT = "COUNT"


class OverrideActionType(str, Enum):
    """Override action for a rule group binding."""

    NONE = "NONE"
    COUNT = "COUNT"


class ChangeAction(str, Enum):
    """Direction of a Web ACL rule update."""

    INSERT = "INSERT"
    DELETE = "DELETE"
