"""Boto3 WAF Client Adapter - Implementation of WafClientPort using boto3."""
from typing import Any

import boto3
from botocore.exceptions import ClientError

from webacl_manager.domain.entities import RuleBinding, WebACL
from webacl_manager.domain.exceptions import WafApiError, WafNotFoundError, WafTransientError
from webacl_manager.domain.value_objects import (
    GLOBAL_REGION,
    WafActionType,
    is_global_scope,
    region_for_scope,
)
from webacl_manager.ports.outbound import LoggerPort

NOT_FOUND_ERROR_CODES = frozenset({"WAFNonexistentItemException"})

# Stale or already-used change tokens, throttling, entities not yet propagated
TRANSIENT_ERROR_CODES = frozenset({
    "WAFStaleDataException",
    "WAFUnavailableEntityException",
    "ThrottlingException",
    "ThrottledException",
    "RequestLimitExceeded",
})

LIST_PAGE_SIZE = 100


class Boto3WafClient:
    """
    Implementation of WafClientPort using boto3.

    The "global" scope talks to the ``waf`` endpoint in us-east-1, any
    other scope is a region served by ``waf-regional``. Both expose the
    same Web ACL API.
    """

    def __init__(
        self,
        logger: LoggerPort,
        session: boto3.Session | None = None,
    ):
        """
        Initialize the WAF client.

        Args:
            logger: Logger for operation logging
            session: Optional boto3 session (uses default if not provided)
        """
        self._logger = logger
        self._session = session or boto3.Session()
        self._client_cache: dict[str, Any] = {}

    def _get_client(self, service: str, region: str) -> Any:
        """Get or create a boto3 client for a service/region combination."""
        cache_key = f"{service}:{region}"
        if cache_key not in self._client_cache:
            self._client_cache[cache_key] = self._session.client(service, region_name=region)
        return self._client_cache[cache_key]

    def client_for_scope(self, scope: str) -> Any:
        """Get the boto3 WAF client serving a scope."""
        service = "waf" if is_global_scope(scope) else "waf-regional"
        return self._get_client(service, region_for_scope(scope))

    def get_caller_identity(self) -> dict:
        """Get the current AWS identity."""
        sts = self._get_client("sts", GLOBAL_REGION)
        response = sts.get_caller_identity()
        return {
            "account": response["Account"],
            "arn": response["Arn"],
            "user_id": response["UserId"],
        }

    def assume_role(
        self,
        role_arn: str,
        session_name: str,
        external_id: str | None = None,
    ) -> "Boto3WafClient":
        """
        Assume a role and return a new client with those credentials.

        Args:
            role_arn: ARN of the role to assume
            session_name: Name for the assumed role session
            external_id: Optional external ID for confused deputy prevention

        Returns:
            New Boto3WafClient with assumed role credentials
        """
        self._logger.info(f"Assuming role: {role_arn}")
        sts = self._get_client("sts", GLOBAL_REGION)

        assume_params = {
            "RoleArn": role_arn,
            "RoleSessionName": session_name,
        }
        if external_id:
            assume_params["ExternalId"] = external_id

        response = sts.assume_role(**assume_params)
        credentials = response["Credentials"]
        new_session = boto3.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
        )
        return Boto3WafClient(logger=self._logger, session=new_session)

    # Change tokens

    def get_change_token(self, scope: str) -> str:
        """Acquire a new change token for a scope."""
        waf = self.client_for_scope(scope)
        try:
            response = waf.get_change_token()
        except ClientError as e:
            raise _translate_error(e, "GetChangeToken") from e
        return response["ChangeToken"]

    # Web ACL methods

    def create_web_acl(
        self,
        scope: str,
        name: str,
        metric_name: str,
        default_action: WafActionType,
        change_token: str,
    ) -> WebACL:
        """Create an empty Web ACL."""
        waf = self.client_for_scope(scope)
        try:
            response = waf.create_web_acl(
                Name=name,
                MetricName=metric_name,
                DefaultAction={"Type": default_action.value},
                ChangeToken=change_token,
            )
        except ClientError as e:
            raise _translate_error(e, "CreateWebACL") from e

        return self._to_web_acl(response["WebACL"], scope)

    def get_web_acl(self, scope: str, web_acl_id: str) -> WebACL:
        """Fetch a Web ACL with its default action and rule bindings."""
        waf = self.client_for_scope(scope)
        try:
            response = waf.get_web_acl(WebACLId=web_acl_id)
        except ClientError as e:
            raise _translate_error(e, "GetWebACL") from e

        return self._to_web_acl(response["WebACL"], scope)

    def update_web_acl(
        self,
        scope: str,
        web_acl_id: str,
        change_token: str,
        updates: list[dict[str, Any]],
        default_action: WafActionType | None = None,
    ) -> str:
        """Apply rule updates and optionally a new default action."""
        waf = self.client_for_scope(scope)

        params: dict[str, Any] = {
            "WebACLId": web_acl_id,
            "ChangeToken": change_token,
        }
        if updates:
            params["Updates"] = updates
        if default_action is not None:
            params["DefaultAction"] = {"Type": default_action.value}

        self._logger.debug(
            "Calling UpdateWebACL",
            web_acl_id=web_acl_id,
            updates_count=len(updates),
        )
        try:
            response = waf.update_web_acl(**params)
        except ClientError as e:
            raise _translate_error(e, "UpdateWebACL") from e
        return response["ChangeToken"]

    def delete_web_acl(self, scope: str, web_acl_id: str, change_token: str) -> str:
        """Delete an empty Web ACL."""
        waf = self.client_for_scope(scope)
        try:
            response = waf.delete_web_acl(WebACLId=web_acl_id, ChangeToken=change_token)
        except ClientError as e:
            raise _translate_error(e, "DeleteWebACL") from e
        return response["ChangeToken"]

    def list_web_acls(self, scope: str) -> list[WebACL]:
        """List Web ACL summaries in a scope."""
        waf = self.client_for_scope(scope)
        web_acls = []

        try:
            next_marker = None
            while True:
                if next_marker:
                    response = waf.list_web_acls(Limit=LIST_PAGE_SIZE, NextMarker=next_marker)
                else:
                    response = waf.list_web_acls(Limit=LIST_PAGE_SIZE)

                for summary in response.get("WebACLs", []):
                    web_acls.append(WebACL(
                        id=summary["WebACLId"],
                        name=summary["Name"],
                        metric_name="",
                        default_action=None,
                        scope=scope,
                    ))

                next_marker = response.get("NextMarker")
                # An empty page ends the listing even when a marker comes back
                if not next_marker or not response.get("WebACLs"):
                    break
        except ClientError as e:
            raise _translate_error(e, "ListWebACLs") from e

        return web_acls

    def _to_web_acl(self, data: dict[str, Any], scope: str) -> WebACL:
        """Convert a WAF WebACL structure to a WebACL entity."""
        return WebACL(
            id=data["WebACLId"],
            name=data.get("Name", ""),
            metric_name=data.get("MetricName", ""),
            default_action=WafActionType(data["DefaultAction"]["Type"]),
            scope=scope,
            rules=[RuleBinding.from_activated_rule(r) for r in data.get("Rules", [])],
            arn=data.get("WebACLArn"),
        )


def _translate_error(error: ClientError, operation: str) -> WafApiError:
    """Map a botocore ClientError to the domain error taxonomy."""
    error_info = error.response.get("Error", {})
    code = error_info.get("Code", "Unknown")
    message = error_info.get("Message", str(error))

    if code in NOT_FOUND_ERROR_CODES:
        return WafNotFoundError(code, message, operation)
    if code in TRANSIENT_ERROR_CODES:
        return WafTransientError(code, message, operation)
    return WafApiError(code, message, operation)
