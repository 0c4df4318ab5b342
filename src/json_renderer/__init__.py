"""
json-renderer

Declarative UI trees resolved against a data model.

This package provides:
- specs: pydantic models for the wire format (values, logic, actions, elements, patches)
- core: paths, dynamic values, visibility, validation, actions, catalogs, patches
- runtime: data store, action dispatcher, field validation, streaming, tree walker
"""

__version__ = "0.1.0"

from json_renderer.core.catalog import create_catalog
from json_renderer.runtime.session import UIRuntime
from json_renderer.runtime.stream import UIStream

__all__ = ["__version__", "create_catalog", "UIRuntime", "UIStream"]
