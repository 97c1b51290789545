"""WAF Web ACL Manager.

Create, read, update and delete AWS WAF Classic Web ACLs, applying every
mutation with a fresh change token and retrying when the token goes stale.
"""

__version__ = "0.1.0"

# Application layer
from webacl_manager.application import (
    ChangeTokenCoordinator,
    WebACLService,
    create_web_acl_service,
)
# Domain layer
from webacl_manager.domain import (
    ChangeAction,
    GroupRuleBinding,
    RateBasedRuleBinding,
    RegularRuleBinding,
    ResourceData,
    RuleBinding,
    RuleType,
    WafActionType,
    WebACL,
)

__all__ = [
    "__version__",
    # Domain
    "WebACL",
    "ResourceData",
    "RuleBinding",
    "RegularRuleBinding",
    "RateBasedRuleBinding",
    "GroupRuleBinding",
    "RuleType",
    "WafActionType",
    "ChangeAction",
    # Application
    "ChangeTokenCoordinator",
    "WebACLService",
    "create_web_acl_service",
]
