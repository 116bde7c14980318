from __future__ import annotations

import importlib
import pkgutil
from typing import Dict

from .core import BackendSpec
from .logging import get_logger


BACKENDS_PACKAGE = "backends"

log = get_logger("querygraph.catalog")


def discover_backends(package: str = BACKENDS_PACKAGE) -> Dict[str, BackendSpec]:
    """Import all modules in the backends package and collect decorated actions."""
    specs: Dict[str, BackendSpec] = {}
    try:
        pkg = importlib.import_module(package)
    except ModuleNotFoundError:
        log.warning("No backends package found: %s", package)
        return specs
    for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{package}."):
        try:
            mod = importlib.import_module(m.name)
        except Exception as e:  # noqa: BLE001
            log.warning("Failed to import %s: %s", m.name, e)
            continue
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            spec = getattr(obj, "_backend_spec", None)
            if isinstance(spec, BackendSpec):
                specs[spec.name] = spec
    return specs
