from __future__ import annotations

from hashfile_service.bootstrap.container import RuntimeComponents, build_runtime_components, build_stdio_server
from hashfile_service.bootstrap.lifespan import create_lifespan

__all__ = [
    "RuntimeComponents",
    "build_runtime_components",
    "build_stdio_server",
    "create_lifespan",
]
