"""Domain entities for the Web ACL manager."""
from webacl_manager.domain.entities.resource_data import ResourceData
from webacl_manager.domain.entities.rule_binding import (
    GroupRuleBinding,
    RateBasedRuleBinding,
    RegularRuleBinding,
    RuleBinding,
)
from webacl_manager.domain.entities.web_acl import (
    WebACL,
    parse_default_action,
    validate_metric_name,
)

__all__ = [
    "WebACL",
    "RuleBinding",
    "RegularRuleBinding",
    "RateBasedRuleBinding",
    "GroupRuleBinding",
    "ResourceData",
    "parse_default_action",
    "validate_metric_name",
]
