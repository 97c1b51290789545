"""Rule Translator - Converts between attribute bags and WAF Web ACL request structures."""
from typing import Any, Iterable

from webacl_manager.domain.entities import RuleBinding
from webacl_manager.domain.exceptions import ConfigurationError
from webacl_manager.domain.value_objects import ChangeAction


def parse_rule_bindings(rules: Iterable[dict[str, Any]] | None) -> list[RuleBinding]:
    """
    Parse attribute-bag rule entries into rule bindings.

    Raises:
        ConfigurationError: if an entry is malformed, for example a GROUP
            binding without an override_action
    """
    if rules is None:
        return []
    if isinstance(rules, (str, bytes, dict)):
        raise ConfigurationError("rules must be a list of rule bindings")
    return [RuleBinding.from_attributes(rule) for rule in rules]


def build_rule_updates(
    bindings: Iterable[RuleBinding],
    change_action: ChangeAction,
) -> list[dict[str, Any]]:
    """
    Build one WebACLUpdate per binding, all with the same change action.

    GROUP bindings carry an OverrideAction, every other kind an Action.
    """
    return [
        {
            "Action": change_action.value,
            "ActivatedRule": binding.to_activated_rule(),
        }
        for binding in bindings
    ]


def flatten_rule_bindings(bindings: Iterable[RuleBinding]) -> list[dict[str, Any]]:
    """Render bindings as attribute-bag entries, ordered by priority."""
    return [b.to_attributes() for b in sorted(bindings, key=lambda b: (b.priority, b.rule_id))]


def flatten_activated_rules(activated_rules: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Render WAF ActivatedRule structures as attribute-bag entries."""
    return flatten_rule_bindings(RuleBinding.from_activated_rule(r) for r in activated_rules)
