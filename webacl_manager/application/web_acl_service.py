"""Web ACL Service - Create/read/update/delete lifecycle for a WAF Classic Web ACL."""
from typing import TYPE_CHECKING

from webacl_manager.application.change_token_coordinator import ChangeTokenCoordinator
from webacl_manager.application.rule_translator import (
    build_rule_updates,
    flatten_rule_bindings,
    parse_rule_bindings,
)
from webacl_manager.domain.entities import (
    ResourceData,
    WebACL,
    parse_default_action,
    validate_metric_name,
)
from webacl_manager.domain.exceptions import ConfigurationError, WafNotFoundError
from webacl_manager.domain.value_objects import ChangeAction, WafActionType
from webacl_manager.ports.outbound import LoggerPort, WafClientPort

if TYPE_CHECKING:
    from webacl_manager.config import Settings

IMMUTABLE_ATTRIBUTES = ("name", "metric_name")


class WebACLService:
    """
    Core application service for managing one Web ACL at a time.

    The service is driven by a lifecycle runtime (the CLI) that passes in a
    ResourceData attribute bag. Every mutation goes through the change token
    coordinator. Updates always resend the complete rule set as INSERTs
    instead of diffing against the previous state, and deletes drain the
    rules before removing the Web ACL because WAF refuses to delete a
    non-empty one.
    """

    def __init__(
        self,
        waf_client: WafClientPort,
        logger: LoggerPort,
        coordinator: ChangeTokenCoordinator,
    ):
        """
        Initialize the Web ACL service.

        Args:
            waf_client: WAF client for Web ACL operations
            logger: Logger for operation logging
            coordinator: Coordinator issuing change tokens for the client's scope
        """
        self._waf_client = waf_client
        self._logger = logger
        self._coordinator = coordinator

    @property
    def scope(self) -> str:
        return self._coordinator.scope

    def create(self, data: ResourceData) -> ResourceData:
        """
        Create the Web ACL, then attach its rules with a full update.

        Raises:
            ConfigurationError: if name, metric name or default action are invalid
            WebACLOperationError: if a WAF call fails
        """
        name = data.get("name")
        if not name:
            raise ConfigurationError("name is required")
        metric_name = validate_metric_name(data.get("metric_name"))
        default_action = parse_default_action(data.get("default_action"))
        # Fail before touching AWS if any rule is malformed
        parse_rule_bindings(data.get("rules"))

        self._logger.info("Creating WAF Web ACL", name=name, scope=self.scope)

        web_acl: WebACL = self._coordinator.run(
            lambda token: self._waf_client.create_web_acl(
                scope=self.scope,
                name=name,
                metric_name=metric_name,
                default_action=default_action,
                change_token=token,
            ),
            "creating WAF Web ACL",
        )
        data.set_id(web_acl.id)
        self._logger.info("Created WAF Web ACL", web_acl_id=web_acl.id, name=name)

        return self.update(data)

    def read(self, data: ResourceData) -> ResourceData:
        """
        Sync the attribute bag with AWS.

        A Web ACL that no longer exists clears the identity instead of failing.
        """
        if data.is_absent():
            return data

        try:
            web_acl = self._waf_client.get_web_acl(self.scope, data.id)
        except WafNotFoundError:
            self._logger.warning(
                f"WAF Web ACL ({data.id}) not found, removing from state",
                scope=self.scope,
            )
            data.set_id("")
            return data

        data.set("name", web_acl.name)
        data.set("metric_name", web_acl.metric_name)
        data.set("default_action", web_acl.default_action.value)
        data.set("rules", flatten_rule_bindings(web_acl.rules))

        self._logger.debug(
            "Read WAF Web ACL",
            web_acl_id=data.id,
            rules_count=len(web_acl.rules),
        )
        return data

    def update(self, data: ResourceData) -> ResourceData:
        """
        Push the default action (if changed) and every declared rule as INSERTs.

        Raises:
            ConfigurationError: if the declared rules or default action are
                invalid, or the name or metric name differ from the synced ones
            WebACLOperationError: if the update fails
        """
        self._check_immutable(data)
        bindings = parse_rule_bindings(data.get("rules"))
        default_action = self._changed_default_action(data)

        updates = build_rule_updates(bindings, ChangeAction.INSERT)
        web_acl_id = data.id

        self._logger.info(
            "Updating WAF Web ACL",
            web_acl_id=web_acl_id,
            rules_count=len(updates),
            default_action=default_action.value if default_action else "unchanged",
        )

        self._coordinator.run(
            lambda token: self._waf_client.update_web_acl(
                scope=self.scope,
                web_acl_id=web_acl_id,
                change_token=token,
                updates=updates,
                default_action=default_action,
            ),
            "updating WAF Web ACL",
        )

        return self.read(data)

    def _check_immutable(self, data: ResourceData) -> None:
        for key in IMMUTABLE_ATTRIBUTES:
            synced = data.get_synced(key)
            desired = data.get(key)
            if synced is not None and desired is not None and desired != synced:
                raise ConfigurationError(
                    f"{key} of WAF Web ACL {data.id} cannot be changed ({synced!r} -> {desired!r})"
                )

    def _changed_default_action(self, data: ResourceData) -> WafActionType | None:
        """Desired default action, or None when it matches the synced one."""
        if not data.has_change("default_action"):
            return None
        desired = parse_default_action(data.get("default_action"))
        synced = data.get_synced("default_action")
        if synced is not None and parse_default_action(synced) == desired:
            return None
        return desired

    def delete(self, data: ResourceData) -> ResourceData:
        """
        Remove every bound rule, then delete the Web ACL.

        Raises:
            WebACLOperationError: if draining the rules or the delete fails
        """
        web_acl_id = data.id
        bindings = parse_rule_bindings(data.get("rules"))

        if bindings:
            updates = build_rule_updates(bindings, ChangeAction.DELETE)
            self._logger.info(
                "Removing WAF Web ACL rules",
                web_acl_id=web_acl_id,
                rules_count=len(updates),
            )
            self._coordinator.run(
                lambda token: self._waf_client.update_web_acl(
                    scope=self.scope,
                    web_acl_id=web_acl_id,
                    change_token=token,
                    updates=updates,
                ),
                "removing WAF Web ACL rules",
            )

        self._logger.info("Deleting WAF Web ACL", web_acl_id=web_acl_id)
        self._coordinator.run(
            lambda token: self._waf_client.delete_web_acl(
                scope=self.scope,
                web_acl_id=web_acl_id,
                change_token=token,
            ),
            "deleting WAF Web ACL",
        )

        data.set_id("")
        return data

    def load(self, web_acl_id: str) -> ResourceData:
        """Build an attribute bag for an existing Web ACL and sync it."""
        return self.read(ResourceData(id=web_acl_id))

    def list_web_acls(self) -> list[WebACL]:
        """List Web ACL summaries in the service's scope."""
        web_acls = self._waf_client.list_web_acls(self.scope)
        self._logger.debug(f"Found {len(web_acls)} WAF Web ACLs", scope=self.scope)
        return web_acls


def create_web_acl_service(
    logger: LoggerPort,
    settings: "Settings | None" = None,
    role_arn: str | None = None,
) -> WebACLService:
    """
    Factory function to create a properly configured WebACLService.

    Args:
        logger: Logger instance to use
        settings: Scope and retry settings (defaults to Settings.from_env())
        role_arn: Optional role to assume for cross-account access

    Returns:
        Configured WebACLService instance
    """
    from webacl_manager.adapters.outbound import Boto3WafClient
    from webacl_manager.config import Settings

    settings = settings or Settings.from_env()

    waf_client = Boto3WafClient(logger=logger)

    if role_arn:
        waf_client = waf_client.assume_role(
            role_arn=role_arn,
            session_name="webacl-manager",
        )

    coordinator = ChangeTokenCoordinator(
        token_source=waf_client.get_change_token,
        scope=settings.scope,
        logger=logger,
        max_attempts=settings.max_attempts,
        base_delay=settings.retry_base_delay,
        max_delay=settings.retry_max_delay,
    )

    return WebACLService(
        waf_client=waf_client,
        logger=logger,
        coordinator=coordinator,
    )
