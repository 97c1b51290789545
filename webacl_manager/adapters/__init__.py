"""Adapters - Concrete implementations of ports."""
from webacl_manager.adapters.outbound import (
    Boto3WafClient,
    CloudWatchLogger,
    ConsoleLogger,
)

__all__ = [
    "Boto3WafClient",
    "ConsoleLogger",
    "CloudWatchLogger",
]
