"""Test configuration and shared fixtures."""
import copy
from typing import Any

import pytest

from webacl_manager.application import ChangeTokenCoordinator, WebACLService
from webacl_manager.domain.entities import RuleBinding, WebACL
from webacl_manager.domain.exceptions import WafApiError, WafNotFoundError, WafTransientError
from webacl_manager.domain.value_objects import WafActionType


class RecordingLogger:
    """LoggerPort implementation that keeps every entry in memory."""

    def __init__(self):
        self.entries: list[tuple[str, str, dict]] = []

    def debug(self, message: str, **kwargs: Any) -> None:
        self.entries.append(("DEBUG", message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self.entries.append(("INFO", message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.entries.append(("WARNING", message, kwargs))

    def error(self, message: str, exception: Exception | None = None, **kwargs: Any) -> None:
        self.entries.append(("ERROR", message, kwargs))

    def set_level(self, level: str) -> None:
        pass

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message, _ in self.entries if lvl == level]


class FakeWafClient:
    """
    In-memory WafClientPort.

    Tokens are single use: reusing one raises WAFStaleDataException.
    Exceptions queued in ``failures`` are raised by the next mutations,
    in order, before the token is consumed.
    """

    def __init__(self):
        self.web_acls: dict[str, WebACL] = {}
        self.calls: list[tuple] = []
        self.failures: list[Exception] = []
        self.tokens_issued = 0
        self._consumed: set[str] = set()
        self._next_id = 0

    def get_change_token(self, scope: str) -> str:
        self.tokens_issued += 1
        self.calls.append(("get_change_token", scope))
        return f"token-{self.tokens_issued}"

    def create_web_acl(self, scope, name, metric_name, default_action, change_token) -> WebACL:
        self.calls.append(("create_web_acl", name))
        self._consume(change_token, "CreateWebACL")
        self._next_id += 1
        web_acl = WebACL(
            id=f"acl-{self._next_id}",
            name=name,
            metric_name=metric_name,
            default_action=default_action,
            scope=scope,
        )
        self.web_acls[web_acl.id] = web_acl
        return copy.deepcopy(web_acl)

    def get_web_acl(self, scope, web_acl_id) -> WebACL:
        self.calls.append(("get_web_acl", web_acl_id))
        if web_acl_id not in self.web_acls:
            raise WafNotFoundError("WAFNonexistentItemException", "The referenced item does not exist.", "GetWebACL")
        return copy.deepcopy(self.web_acls[web_acl_id])

    def update_web_acl(self, scope, web_acl_id, change_token, updates, default_action=None) -> str:
        self.calls.append(("update_web_acl", web_acl_id, copy.deepcopy(updates), default_action))
        self._consume(change_token, "UpdateWebACL")
        web_acl = self._require(web_acl_id, "UpdateWebACL")
        if default_action is not None:
            web_acl.default_action = default_action
        for update in updates:
            binding = RuleBinding.from_activated_rule(update["ActivatedRule"])
            web_acl.rules = [r for r in web_acl.rules if r.rule_id != binding.rule_id]
            if update["Action"] == "INSERT":
                web_acl.rules.append(binding)
        return change_token

    def delete_web_acl(self, scope, web_acl_id, change_token) -> str:
        self.calls.append(("delete_web_acl", web_acl_id))
        self._consume(change_token, "DeleteWebACL")
        web_acl = self._require(web_acl_id, "DeleteWebACL")
        if web_acl.rules:
            raise WafApiError("WAFNonEmptyEntityException", "The Web ACL still has rules.", "DeleteWebACL")
        del self.web_acls[web_acl_id]
        return change_token

    def list_web_acls(self, scope) -> list[WebACL]:
        return [
            WebACL(id=acl.id, name=acl.name, metric_name="", default_action=None, scope=scope)
            for acl in self.web_acls.values()
        ]

    def get_caller_identity(self) -> dict:
        return {"account": "123456789012", "arn": "arn:aws:iam::123456789012:user/test", "user_id": "AIDTEST"}

    def assume_role(self, role_arn, session_name, external_id=None) -> "FakeWafClient":
        return self

    def add_web_acl(self, web_acl_id: str, rules: list[RuleBinding] | None = None) -> WebACL:
        """Seed an existing Web ACL."""
        web_acl = WebACL(
            id=web_acl_id,
            name=f"{web_acl_id}-name",
            metric_name="seededMetric",
            default_action=WafActionType.ALLOW,
            scope="global",
            rules=list(rules or []),
        )
        self.web_acls[web_acl_id] = web_acl
        return web_acl

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _consume(self, token: str, operation: str) -> None:
        if self.failures:
            raise self.failures.pop(0)
        if token in self._consumed:
            raise WafTransientError("WAFStaleDataException", "The change token has been used.", operation)
        self._consumed.add(token)

    def _require(self, web_acl_id: str, operation: str) -> WebACL:
        if web_acl_id not in self.web_acls:
            raise WafNotFoundError("WAFNonexistentItemException", "The referenced item does not exist.", operation)
        return self.web_acls[web_acl_id]


@pytest.fixture
def logger() -> RecordingLogger:
    """Logger that records entries for assertions."""
    return RecordingLogger()


@pytest.fixture
def fake_waf_client() -> FakeWafClient:
    """In-memory WAF client."""
    return FakeWafClient()


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays requested by the coordinator."""
    return []


@pytest.fixture
def coordinator(fake_waf_client, logger, sleeps) -> ChangeTokenCoordinator:
    """Coordinator backed by the fake client that never really sleeps."""
    return ChangeTokenCoordinator(
        token_source=fake_waf_client.get_change_token,
        scope="global",
        logger=logger,
        max_attempts=3,
        sleep=sleeps.append,
    )


@pytest.fixture
def service(fake_waf_client, logger, coordinator) -> WebACLService:
    """WebACLService wired to the fake client."""
    return WebACLService(
        waf_client=fake_waf_client,
        logger=logger,
        coordinator=coordinator,
    )


@pytest.fixture
def sample_definition() -> dict:
    """Definition of a Web ACL with one regular rule."""
    return {
        "name": "acl1",
        "metric_name": "acl1Metric",
        "default_action": "ALLOW",
        "rules": [
            {"rule_id": "r1", "priority": 1, "type": "REGULAR", "action": "BLOCK"},
        ],
    }
