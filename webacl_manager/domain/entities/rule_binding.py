"""Rule bindings: a rule attached to a Web ACL with a priority and an action.

A binding is one of three variants. Regular and rate-based rules carry a
plain action, rule groups carry an override action. Each variant renders
itself as a WAF ``ActivatedRule`` so callers never branch on the kind.
"""
from dataclasses import dataclass
from typing import Any, ClassVar

from webacl_manager.domain.exceptions import ConfigurationError
from webacl_manager.domain.value_objects import OverrideActionType, RuleType, WafActionType


@dataclass(frozen=True)
class RuleBinding:
    """Base class for a rule bound to a Web ACL."""

    rule_id: str
    priority: int

    rule_type: ClassVar[RuleType]

    def to_activated_rule(self) -> dict[str, Any]:
        """Render the binding as a WAF ActivatedRule structure."""
        return {
            "Priority": self.priority,
            "RuleId": self.rule_id,
            "Type": self.rule_type.value,
            **self._action_payload(),
        }

    def to_attributes(self) -> dict[str, Any]:
        """Render the binding as an attribute-bag entry."""
        raise NotImplementedError

    def _action_payload(self) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_attributes(attributes: dict[str, Any]) -> "RuleBinding":
        """
        Build a binding from an attribute-bag entry.

        Expected keys: ``rule_id``, ``priority``, ``type`` (defaults to
        REGULAR) and either ``action`` or ``override_action``. Actions may be
        given as a plain string or as ``{"type": "BLOCK"}``.

        Raises:
            ConfigurationError: if a required key is missing or a value is unknown
        """
        if not isinstance(attributes, dict):
            raise ConfigurationError(f"rule binding must be an object, got {attributes!r}")

        rule_id = attributes.get("rule_id")
        if not rule_id:
            raise ConfigurationError("rule binding is missing 'rule_id'")

        if "priority" not in attributes:
            raise ConfigurationError(f"rule binding {rule_id} is missing 'priority'")
        priority = _parse_priority(attributes["priority"], rule_id)

        rule_type = _parse_enum(RuleType, attributes.get("type") or RuleType.REGULAR.value, rule_id, "type")

        if rule_type.uses_override_action:
            raw = _unwrap_action(attributes.get("override_action"))
            if raw is None:
                raise ConfigurationError(
                    f"rule binding {rule_id} of type GROUP requires an 'override_action'"
                )
            return GroupRuleBinding(
                rule_id=rule_id,
                priority=priority,
                override_action=_parse_enum(OverrideActionType, raw, rule_id, "override_action"),
            )

        raw = _unwrap_action(attributes.get("action"))
        if raw is None:
            raise ConfigurationError(
                f"rule binding {rule_id} of type {rule_type.value} requires an 'action'"
            )
        action = _parse_enum(WafActionType, raw, rule_id, "action")
        if rule_type == RuleType.RATE_BASED:
            return RateBasedRuleBinding(rule_id=rule_id, priority=priority, action=action)
        return RegularRuleBinding(rule_id=rule_id, priority=priority, action=action)

    @staticmethod
    def from_activated_rule(activated_rule: dict[str, Any]) -> "RuleBinding":
        """Build a binding from a WAF ActivatedRule structure."""
        rule_id = activated_rule["RuleId"]
        priority = activated_rule["Priority"]
        rule_type = RuleType(activated_rule.get("Type") or RuleType.REGULAR.value)

        if rule_type.uses_override_action:
            return GroupRuleBinding(
                rule_id=rule_id,
                priority=priority,
                override_action=OverrideActionType(activated_rule["OverrideAction"]["Type"]),
            )

        action = WafActionType(activated_rule["Action"]["Type"])
        if rule_type == RuleType.RATE_BASED:
            return RateBasedRuleBinding(rule_id=rule_id, priority=priority, action=action)
        return RegularRuleBinding(rule_id=rule_id, priority=priority, action=action)


@dataclass(frozen=True)
class RegularRuleBinding(RuleBinding):
    """A regular rule with a plain action."""

    action: WafActionType = WafActionType.BLOCK

    rule_type: ClassVar[RuleType] = RuleType.REGULAR

    def _action_payload(self) -> dict[str, Any]:
        return {"Action": {"Type": self.action.value}}

    def to_attributes(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "priority": self.priority,
            "type": self.rule_type.value,
            "action": self.action.value,
        }


@dataclass(frozen=True)
class RateBasedRuleBinding(RegularRuleBinding):
    """A rate-based rule with a plain action."""

    rule_type: ClassVar[RuleType] = RuleType.RATE_BASED


@dataclass(frozen=True)
class GroupRuleBinding(RuleBinding):
    """A rule group with an override action."""

    override_action: OverrideActionType = OverrideActionType.NONE

    rule_type: ClassVar[RuleType] = RuleType.GROUP

    def _action_payload(self) -> dict[str, Any]:
        return {"OverrideAction": {"Type": self.override_action.value}}

    def to_attributes(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "priority": self.priority,
            "type": self.rule_type.value,
            "override_action": self.override_action.value,
        }


def _parse_priority(value: Any, rule_id: str) -> int:
    # bool is an int subclass; 1.5 and True must not become 1
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise ConfigurationError(f"rule binding {rule_id} has a non-integer priority: {value!r}")


def _unwrap_action(value: Any) -> str | None:
    # Accept "BLOCK", {"type": "BLOCK"} and [{"type": "BLOCK"}]
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("type")
    return value or None


def _parse_enum(enum_cls, value: Any, rule_id: str, field: str):
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"rule binding {rule_id} has invalid {field} {value!r} (expected one of: {allowed})"
        ) from None
