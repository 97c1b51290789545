"""Tests for the Web ACL lifecycle service."""
import pytest

from webacl_manager.domain.entities import (
    GroupRuleBinding,
    RegularRuleBinding,
    ResourceData,
)
from webacl_manager.domain.exceptions import (
    ConfigurationError,
    RetryBudgetExhaustedError,
    WafApiError,
    WafTransientError,
    WebACLOperationError,
)
from webacl_manager.domain.value_objects import OverrideActionType, WafActionType


def stale() -> WafTransientError:
    return WafTransientError("WAFStaleDataException", "The input token is no longer current.", "UpdateWebACL")


class TestCreate:
    """Test Web ACL creation."""

    def test_create_then_read_returns_submitted_values(self, service, sample_definition):
        """The created Web ACL reads back with the submitted attributes."""
        data = service.create(ResourceData(attributes=sample_definition))

        assert data.id
        reread = service.load(data.id)
        assert reread.get("name") == "acl1"
        assert reread.get("metric_name") == "acl1Metric"
        assert reread.get("default_action") == "ALLOW"

    def test_create_is_followed_by_full_update(self, service, fake_waf_client, sample_definition):
        """Rules are attached by an update right after the create."""
        service.create(ResourceData(attributes=sample_definition))

        names = [n for n in fake_waf_client.call_names() if n != "get_change_token"]
        assert names[:2] == ["create_web_acl", "update_web_acl"]
        update_call = next(c for c in fake_waf_client.calls if c[0] == "update_web_acl")
        assert update_call[3] == WafActionType.ALLOW
        assert len(update_call[2]) == 1

    def test_create_rejects_invalid_metric_name(self, service, fake_waf_client, sample_definition):
        """Metric names are validated before any AWS call."""
        sample_definition["metric_name"] = "acl-1 metric"

        with pytest.raises(ConfigurationError):
            service.create(ResourceData(attributes=sample_definition))

        assert fake_waf_client.calls == []

    def test_create_rejects_malformed_rules_before_creating(self, service, fake_waf_client, sample_definition):
        """A GROUP binding without an override action fails up front."""
        sample_definition["rules"] = [{"rule_id": "g1", "priority": 1, "type": "GROUP"}]

        with pytest.raises(ConfigurationError):
            service.create(ResourceData(attributes=sample_definition))

        assert fake_waf_client.web_acls == {}

    def test_create_requires_name(self, service, sample_definition):
        """Name is required."""
        del sample_definition["name"]
        with pytest.raises(ConfigurationError, match="name"):
            service.create(ResourceData(attributes=sample_definition))

    def test_create_retries_stale_token(self, service, fake_waf_client, sample_definition):
        """A stale token on create is retried with a new one."""
        fake_waf_client.failures.append(stale())

        data = service.create(ResourceData(attributes=sample_definition))

        assert data.id in fake_waf_client.web_acls
        assert fake_waf_client.call_names().count("create_web_acl") == 2


class TestRead:
    """Test syncing state from AWS."""

    def test_read_syncs_attributes(self, service, fake_waf_client):
        """Read normalizes the bag to the remote state."""
        fake_waf_client.add_web_acl("acl-x", rules=[
            GroupRuleBinding(rule_id="g1", priority=2, override_action=OverrideActionType.COUNT),
            RegularRuleBinding(rule_id="r1", priority=1, action=WafActionType.BLOCK),
        ])

        data = service.read(ResourceData(id="acl-x"))

        assert data.get("name") == "acl-x-name"
        assert data.get("rules") == [
            {"rule_id": "r1", "priority": 1, "type": "REGULAR", "action": "BLOCK"},
            {"rule_id": "g1", "priority": 2, "type": "GROUP", "override_action": "COUNT"},
        ]
        assert data.has_change("rules") is False

    def test_read_not_found_clears_identity(self, service, logger):
        """A missing Web ACL is treated as deleted, not as an error."""
        data = service.read(ResourceData(id="acl-gone"))

        assert data.is_absent() is True
        assert any("not found" in m for m in logger.messages("WARNING"))

    def test_read_after_not_found_is_noop(self, service, fake_waf_client):
        """Reading an absent resource again makes no AWS call."""
        data = service.read(ResourceData(id="acl-gone"))
        calls_before = len(fake_waf_client.calls)

        service.read(data)

        assert data.is_absent() is True
        assert len(fake_waf_client.calls) == calls_before

    def test_read_surfaces_other_errors(self, service, fake_waf_client, monkeypatch):
        """Errors other than not-found propagate."""
        def denied(scope, web_acl_id):
            raise WafApiError("AccessDeniedException", "denied", "GetWebACL")

        monkeypatch.setattr(fake_waf_client, "get_web_acl", denied)

        with pytest.raises(WafApiError):
            service.read(ResourceData(id="acl-1"))


class TestUpdate:
    """Test full-resend updates."""

    def test_update_resends_every_rule_as_insert(self, service, fake_waf_client):
        """All declared rules are sent, not just the new ones."""
        fake_waf_client.add_web_acl("acl-1", rules=[
            RegularRuleBinding(rule_id="r1", priority=1, action=WafActionType.BLOCK),
        ])
        data = service.load("acl-1")
        rules = data.get("rules") + [
            {"rule_id": "g1", "priority": 2, "type": "GROUP", "override_action": "NONE"},
        ]
        data.apply_config({**data.to_dict(), "rules": rules})

        service.update(data)

        update_call = next(c for c in fake_waf_client.calls if c[0] == "update_web_acl")
        updates = update_call[2]
        assert [u["ActivatedRule"]["RuleId"] for u in updates] == ["r1", "g1"]
        assert {u["Action"] for u in updates} == {"INSERT"}
        assert "OverrideAction" in updates[1]["ActivatedRule"]
        assert "Action" not in updates[1]["ActivatedRule"]

    def test_unchanged_default_action_is_not_sent(self, service, fake_waf_client):
        """The default action is only included when it changed."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")

        service.update(data)

        update_call = next(c for c in fake_waf_client.calls if c[0] == "update_web_acl")
        assert update_call[3] is None

    def test_changed_default_action_is_sent(self, service, fake_waf_client):
        """A new default action is included in the update."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        data.apply_config({**data.to_dict(), "default_action": "BLOCK"})

        service.update(data)

        assert fake_waf_client.web_acls["acl-1"].default_action == WafActionType.BLOCK
        assert data.get("default_action") == "BLOCK"

    @pytest.mark.parametrize("default_action", ["allow", {"type": "ALLOW"}, [{"type": "ALLOW"}]])
    def test_equivalent_default_action_is_not_sent(self, service, fake_waf_client, default_action):
        """Other spellings of the current default action do not count as a change."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        data.apply_config({**data.to_dict(), "default_action": default_action})

        service.update(data)

        update_call = next(c for c in fake_waf_client.calls if c[0] == "update_web_acl")
        assert update_call[3] is None

    @pytest.mark.parametrize("key,value", [("name", "renamed"), ("metric_name", "renamedMetric")])
    def test_immutable_attributes_cannot_change(self, service, fake_waf_client, key, value):
        """Renaming an existing Web ACL is rejected before any update is sent."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        data.apply_config({**data.to_dict(), key: value})

        with pytest.raises(ConfigurationError, match=key):
            service.update(data)

        assert "update_web_acl" not in fake_waf_client.call_names()

    def test_omitted_name_is_kept(self, service, fake_waf_client):
        """A definition without name or metric name updates the existing Web ACL."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        data.apply_config({"default_action": "BLOCK"})

        service.update(data)

        assert data.get("name") == "acl-1-name"
        assert fake_waf_client.web_acls["acl-1"].default_action == WafActionType.BLOCK

    def test_update_wraps_fatal_errors(self, service, fake_waf_client):
        """Fatal errors carry the attempted operation."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        fake_waf_client.failures.append(
            WafApiError("WAFInvalidParameterException", "Bad priority", "UpdateWebACL")
        )

        with pytest.raises(WebACLOperationError, match="updating WAF Web ACL"):
            service.update(data)

    def test_update_gives_up_after_budget(self, service, fake_waf_client):
        """Persistent stale tokens end in a fatal error."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")
        fake_waf_client.failures.extend([stale(), stale(), stale()])

        with pytest.raises(RetryBudgetExhaustedError):
            service.update(data)


class TestDelete:
    """Test draining and deleting."""

    def test_delete_drains_rules_before_deleting(self, service, fake_waf_client):
        """One DELETE per bound rule, then exactly one Web ACL delete."""
        fake_waf_client.add_web_acl("acl-1", rules=[
            RegularRuleBinding(rule_id="r1", priority=1, action=WafActionType.BLOCK),
            GroupRuleBinding(rule_id="g1", priority=2, override_action=OverrideActionType.NONE),
        ])
        data = service.load("acl-1")

        service.delete(data)

        mutations = [c for c in fake_waf_client.calls if c[0] in ("update_web_acl", "delete_web_acl")]
        assert [c[0] for c in mutations] == ["update_web_acl", "delete_web_acl"]
        updates = mutations[0][2]
        assert len(updates) == 2
        assert {u["Action"] for u in updates} == {"DELETE"}
        assert "acl-1" not in fake_waf_client.web_acls
        assert data.is_absent() is True

    def test_delete_without_rules_skips_drain(self, service, fake_waf_client):
        """An empty Web ACL is deleted directly."""
        fake_waf_client.add_web_acl("acl-1")
        data = service.load("acl-1")

        service.delete(data)

        assert "update_web_acl" not in fake_waf_client.call_names()
        assert fake_waf_client.call_names().count("delete_web_acl") == 1

    def test_failed_drain_does_not_delete(self, service, fake_waf_client):
        """The Web ACL delete is never attempted if draining fails."""
        fake_waf_client.add_web_acl("acl-1", rules=[
            RegularRuleBinding(rule_id="r1", priority=1, action=WafActionType.BLOCK),
        ])
        data = service.load("acl-1")
        fake_waf_client.failures.append(WafApiError("AccessDeniedException", "denied", "UpdateWebACL"))

        with pytest.raises(WebACLOperationError, match="removing WAF Web ACL rules"):
            service.delete(data)

        assert "delete_web_acl" not in fake_waf_client.call_names()
        assert data.id == "acl-1"


class TestScenario:
    """End-to-end lifecycle against the fake client."""

    def test_create_update_read_delete(self, service, fake_waf_client):
        """Create, add a rule, read it back, then delete draining the rule first."""
        data = service.create(ResourceData(attributes={
            "name": "acl1",
            "metric_name": "acl1Metric",
            "default_action": "ALLOW",
        }))
        assert data.get("rules") == []

        data.apply_config({
            **data.to_dict(),
            "rules": [{"rule_id": "r1", "priority": 1, "type": "REGULAR", "action": "BLOCK"}],
        })
        service.update(data)

        assert service.load(data.id).get("rules") == [
            {"rule_id": "r1", "priority": 1, "type": "REGULAR", "action": "BLOCK"},
        ]

        web_acl_id = data.id
        fake_waf_client.calls.clear()
        service.delete(data)

        mutations = [c for c in fake_waf_client.calls if c[0] != "get_change_token"]
        assert mutations[0][0] == "update_web_acl"
        assert mutations[0][2][0]["Action"] == "DELETE"
        assert mutations[0][2][0]["ActivatedRule"]["RuleId"] == "r1"
        assert mutations[1] == ("delete_web_acl", web_acl_id)

    def test_list_web_acls(self, service, fake_waf_client):
        """Listing returns every Web ACL in the scope."""
        fake_waf_client.add_web_acl("acl-1")
        fake_waf_client.add_web_acl("acl-2")

        assert sorted(acl.id for acl in service.list_web_acls()) == ["acl-1", "acl-2"]
