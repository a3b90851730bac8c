from __future__ import annotations

from hashfile_service.modules.common.deps import (
    get_roots_manager,
    get_settings,
    get_tool_registry,
    require_auth,
)

__all__ = [
    "get_roots_manager",
    "get_settings",
    "get_tool_registry",
    "require_auth",
]
