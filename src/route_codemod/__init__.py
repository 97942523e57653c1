from route_codemod.core.codemod import rewrite_source
from route_codemod.core.config import RewriteConfig, load_config
from route_codemod.models import (
    Edit,
    HookBinding,
    HookRole,
    MethodEntry,
    PropertyEntry,
    RejectReason,
    Rejected,
    Rewritten,
    RewriteResult,
    StaticValue,
    Unchanged,
)

__all__ = [
    "Edit",
    "HookBinding",
    "HookRole",
    "MethodEntry",
    "PropertyEntry",
    "RejectReason",
    "Rejected",
    "RewriteConfig",
    "RewriteResult",
    "Rewritten",
    "StaticValue",
    "Unchanged",
    "load_config",
    "rewrite_source",
]
