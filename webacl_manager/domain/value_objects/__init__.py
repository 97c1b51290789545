"""Value objects for the Web ACL manager domain."""
from webacl_manager.domain.value_objects.rule_type import RuleType
from webacl_manager.domain.value_objects.scope import (
    GLOBAL_REGION,
    GLOBAL_SCOPE,
    is_global_scope,
    region_for_scope,
)
from webacl_manager.domain.value_objects.waf_action import (
    ChangeAction,
    OverrideActionType,
    WafActionType,
)

__all__ = [
    "RuleType",
    "WafActionType",
    "OverrideActionType",
    "ChangeAction",
    "GLOBAL_SCOPE",
    "GLOBAL_REGION",
    "is_global_scope",
    "region_for_scope",
]
