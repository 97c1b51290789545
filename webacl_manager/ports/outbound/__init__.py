"""Outbound ports - Interfaces for driven adapters."""
from webacl_manager.ports.outbound.logger_port import LoggerPort
from webacl_manager.ports.outbound.waf_client_port import WafClientPort

__all__ = ["WafClientPort", "LoggerPort"]
