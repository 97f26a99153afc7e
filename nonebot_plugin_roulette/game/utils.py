"""Lightweight reflection helpers used by the plugin (dynamic item loading)."""

from __future__ import annotations

import importlib
import pkgutil


def get_classes_in_module(module: object) -> list[type]:
    """Return all classes defined in a module object."""
    classes = []
    for name in dir(module):
        member = getattr(module, name)
        if isinstance(member, type):
            classes.append(member)
    return classes


def get_modules_in_package_by_prefix(package: str | None, prefix: str) -> list[object]:
    """Import all modules under a package whose module name starts with prefix."""
    if not package:
        return []
    modules = []
    try:
        pkg = importlib.import_module(package)
    except ModuleNotFoundError:
        return modules
    if not hasattr(pkg, "__path__"):
        return modules
    for _, module_name, _ in pkgutil.iter_modules(pkg.__path__):
        if module_name.startswith(prefix):
            modules.append(importlib.import_module(f"{package}.{module_name}"))
    return modules
