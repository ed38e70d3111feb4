"""Per-call identity passed to every facade operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UseCaseContext:
    """
    Who is calling, on behalf of which tenant.

    Resolving these from a request (headers, tokens) is the
    caller's job; the core only trusts what it is handed.
    """
    tenant_id: str
    user_id: str | None = None
