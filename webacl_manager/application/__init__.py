"""Application layer - Use cases and business logic."""
from webacl_manager.application.change_token_coordinator import ChangeTokenCoordinator
from webacl_manager.application.rule_translator import (
    build_rule_updates,
    flatten_activated_rules,
    flatten_rule_bindings,
    parse_rule_bindings,
)
from webacl_manager.application.web_acl_service import (
    WebACLService,
    create_web_acl_service,
)

__all__ = [
    "ChangeTokenCoordinator",
    "WebACLService",
    "create_web_acl_service",
    "build_rule_updates",
    "flatten_activated_rules",
    "flatten_rule_bindings",
    "parse_rule_bindings",
]
