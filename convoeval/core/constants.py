"""Message roles and evaluation listing defaults.

Roles
-----
customer — the person contacting support; source of the display name
agent    — the support representative
system   — automated notices (joins, transfers, bot replies)
"""
from __future__ import annotations

ROLE_CUSTOMER = "customer"
ROLE_AGENT = "agent"
ROLE_SYSTEM = "system"

# Column evaluations are listed by, newest first
DEFAULT_EVALUATION_ORDER = "created_at"
