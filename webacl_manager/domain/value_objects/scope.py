"""WAF scope keys.

WAF Classic has two endpoints: the global one used with CloudFront and the
regional one (``waf-regional``). Change tokens issued by one scope are not
valid in another.
"""

GLOBAL_SCOPE = "global"
GLOBAL_REGION = "us-east-1"


def is_global_scope(scope: str) -> bool:
    """Check if the scope key refers to the global (CloudFront) endpoint."""
    return scope.lower() == GLOBAL_SCOPE


def region_for_scope(scope: str) -> str:
    """Return the AWS region that serves a scope."""
    return GLOBAL_REGION if is_global_scope(scope) else scope
