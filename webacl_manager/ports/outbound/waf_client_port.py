"""WAF Client Port - Interface for AWS WAF Classic operations."""
from typing import Any, Protocol

from webacl_manager.domain.entities import WebACL
from webacl_manager.domain.value_objects import WafActionType


class WafClientPort(Protocol):
    """
    Port interface for WAF Classic Web ACL operations.

    Every ``scope`` argument is a scope key: ``"global"`` or a region name.
    Implementations raise WafNotFoundError, WafTransientError or WafApiError
    from ``webacl_manager.domain.exceptions``.
    """

    def get_change_token(self, scope: str) -> str:
        """
        Acquire a new change token for a scope.

        Args:
            scope: Scope key the token is valid for

        Returns:
            The change token
        """
        ...

    def create_web_acl(
        self,
        scope: str,
        name: str,
        metric_name: str,
        default_action: WafActionType,
        change_token: str,
    ) -> WebACL:
        """
        Create an empty Web ACL.

        Returns:
            The created WebACL, including the id assigned by AWS
        """
        ...

    def get_web_acl(self, scope: str, web_acl_id: str) -> WebACL:
        """
        Fetch a Web ACL with its default action and rule bindings.

        Raises:
            WafNotFoundError: if the Web ACL does not exist
        """
        ...

    def update_web_acl(
        self,
        scope: str,
        web_acl_id: str,
        change_token: str,
        updates: list[dict[str, Any]],
        default_action: WafActionType | None = None,
    ) -> str:
        """
        Apply rule updates (and optionally a new default action) to a Web ACL.

        Args:
            updates: WebACLUpdate structures (``{"Action": ..., "ActivatedRule": ...}``)
            default_action: New default action, or None to leave it unchanged

        Returns:
            The change token consumed by the call
        """
        ...

    def delete_web_acl(self, scope: str, web_acl_id: str, change_token: str) -> str:
        """
        Delete an empty Web ACL.

        Returns:
            The change token consumed by the call
        """
        ...

    def list_web_acls(self, scope: str) -> list[WebACL]:
        """
        List Web ACL summaries in a scope.

        Summaries only carry id and name; use get_web_acl for the rest.
        """
        ...

    def get_caller_identity(self) -> dict:
        """
        Get the current AWS identity.

        Returns:
            Dict with account, arn, user_id
        """
        ...

    def assume_role(
        self,
        role_arn: str,
        session_name: str,
        external_id: str | None = None,
    ) -> "WafClientPort":
        """
        Assume a role and return a new client with those credentials.

        Args:
            role_arn: ARN of the role to assume
            session_name: Name for the assumed role session
            external_id: Optional external ID for the role trust policy

        Returns:
            New WafClientPort instance with assumed credentials
        """
        ...
