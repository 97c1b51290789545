"""Outbound adapters - External services (AWS WAF, logging)."""
from webacl_manager.adapters.outbound.boto3_waf_client import Boto3WafClient
from webacl_manager.adapters.outbound.cloudwatch_logger import CloudWatchLogger
from webacl_manager.adapters.outbound.console_logger import ConsoleLogger

__all__ = [
    "Boto3WafClient",
    "ConsoleLogger",
    "CloudWatchLogger",
]
