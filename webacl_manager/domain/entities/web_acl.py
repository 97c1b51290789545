"""WebACL entity representing an AWS WAF Classic Web ACL."""
import re
from dataclasses import dataclass, field

from webacl_manager.domain.entities.rule_binding import RuleBinding
from webacl_manager.domain.exceptions import ConfigurationError
from webacl_manager.domain.value_objects import WafActionType, is_global_scope

METRIC_NAME_PATTERN = re.compile(r"[0-9A-Za-z]+")


@dataclass
class WebACL:
    """Represents an AWS WAF Classic Web ACL."""

    id: str
    name: str
    metric_name: str
    default_action: WafActionType | None  # None on list summaries
    scope: str  # "global" or a region name

    rules: list[RuleBinding] = field(default_factory=list)
    arn: str | None = None

    def is_global(self) -> bool:
        """Check if this is a global (CloudFront) Web ACL."""
        return is_global_scope(self.scope)

    def is_regional(self) -> bool:
        """Check if this is a regional Web ACL."""
        return not self.is_global()

    def get_rule(self, rule_id: str) -> RuleBinding | None:
        """Get the binding for a rule, if the rule is bound."""
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def __str__(self) -> str:
        return f"WebACL({self.name}, {self.scope}, rules={len(self.rules)})"


def validate_metric_name(metric_name: str) -> str:
    """
    Validate a CloudWatch metric name for a Web ACL.

    WAF only accepts alphanumeric metric names; whitespace and
    punctuation are rejected by the API.

    Raises:
        ConfigurationError: if the name is empty or not alphanumeric
    """
    if not isinstance(metric_name, str) or not METRIC_NAME_PATTERN.fullmatch(metric_name):
        raise ConfigurationError(
            f"Only alphanumeric characters allowed in metric_name: {metric_name!r}"
        )
    return metric_name


def parse_default_action(value) -> WafActionType:
    """
    Parse a default action given as ``"ALLOW"`` or ``{"type": "ALLOW"}``.

    Raises:
        ConfigurationError: if the action is missing or unknown
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("type")
    if not value:
        raise ConfigurationError("default_action is required")
    try:
        return WafActionType(str(value).upper())
    except ValueError:
        allowed = ", ".join(a.value for a in WafActionType)
        raise ConfigurationError(
            f"invalid default_action {value!r} (expected one of: {allowed})"
        ) from None
