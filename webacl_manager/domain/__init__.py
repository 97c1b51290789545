"""Domain layer for the Web ACL manager."""
from webacl_manager.domain.entities import (
    GroupRuleBinding,
    RateBasedRuleBinding,
    RegularRuleBinding,
    ResourceData,
    RuleBinding,
    WebACL,
)
from webacl_manager.domain.exceptions import (
    ConfigurationError,
    RetryBudgetExhaustedError,
    WafApiError,
    WafNotFoundError,
    WafTransientError,
    WebACLError,
    WebACLOperationError,
)
from webacl_manager.domain.value_objects import (
    ChangeAction,
    OverrideActionType,
    RuleType,
    WafActionType,
)

__all__ = [
    "WebACL",
    "RuleBinding",
    "RegularRuleBinding",
    "RateBasedRuleBinding",
    "GroupRuleBinding",
    "ResourceData",
    "RuleType",
    "WafActionType",
    "OverrideActionType",
    "ChangeAction",
    "WebACLError",
    "ConfigurationError",
    "WafApiError",
    "WafNotFoundError",
    "WafTransientError",
    "WebACLOperationError",
    "RetryBudgetExhaustedError",
]
