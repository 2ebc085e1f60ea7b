"""projectboot scaffolder -- renders template trees into a sandboxed root.

Quick usage::

    from projectboot.scaffolder import OutputRoot, TreeWalker

    with OutputRoot.open("/tmp/output", "Foo") as root:
        TreeWalker().materialize("templates/project_base", root, config)
"""

from .base_lint import BaseLint
from .base_local import BaseLocal
from .base_project import BaseProject
from .base_test import BaseTest
from .registry import ScriptContext, ScriptRegistry
from .root import OutputRoot
from .service import Registrar, ScriptReceiver, Service, TemplateService
from .templates import TemplateRenderer
from .walker import TreeWalker

__all__ = [
    "BaseLint",
    "BaseLocal",
    "BaseProject",
    "BaseTest",
    "OutputRoot",
    "Registrar",
    "ScriptContext",
    "ScriptReceiver",
    "ScriptRegistry",
    "Service",
    "TemplateRenderer",
    "TemplateService",
    "TreeWalker",
]
