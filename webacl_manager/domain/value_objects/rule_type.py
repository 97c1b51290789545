"""Rule type enumeration for WAF Web ACL rule bindings."""
from enum import Enum


class RuleType(str, Enum):
    """Kinds of rules that can be bound to a WAF Classic Web ACL."""

    REGULAR = "REGULAR"
    RATE_BASED = "RATE_BASED"
    GROUP = "GROUP"

    @property
    def uses_override_action(self) -> bool:
        """Rule groups carry an override action instead of a plain action."""
        return self == RuleType.GROUP

    @property
    def display_name(self) -> str:
        """Human-readable name for the rule type."""
        mapping = {
            RuleType.REGULAR: "Regular rule",
            RuleType.RATE_BASED: "Rate-based rule",
            RuleType.GROUP: "Rule group",
        }
        return mapping[self]
