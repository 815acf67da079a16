from .reconciliation import budgeted_sum, find_budget_for_section, reconcile_budget
from .sections import rename_section
from .reset import reset_budget
from .users_client import resolve_user_id
from .rollout import evaluate_features, rollout_hash
from .mobile import CodeStore, code_store, decode_token, issue_token

__all__ = [
    "budgeted_sum",
    "find_budget_for_section",
    "reconcile_budget",
    "rename_section",
    "reset_budget",
    "resolve_user_id",
    "evaluate_features",
    "rollout_hash",
    "CodeStore",
    "code_store",
    "decode_token",
    "issue_token",
]
