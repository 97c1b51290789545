"""Ports - Abstract interfaces for external dependencies."""
from webacl_manager.ports.outbound import LoggerPort, WafClientPort

__all__ = ["WafClientPort", "LoggerPort"]
