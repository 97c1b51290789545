"""WAF Web ACL Manager - Main entry point.

Manage AWS WAF Classic Web ACLs from JSON definitions.
"""
from webacl_manager.adapters.inbound.cli_adapter import main as cli_main


def main() -> None:
    """Main entry point - delegates to CLI adapter."""
    cli_main()


if __name__ == "__main__":
    main()
