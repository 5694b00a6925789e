"""Registry bootstrap — builds and freezes the process-wide module registry."""

from app.core.module_registry import ModuleRegistry
from app.modules.admin.bootstrap import register_admin_module


def build_registry() -> ModuleRegistry:
    registry = ModuleRegistry()
    register_admin_module(registry)
    registry.freeze()
    return registry
