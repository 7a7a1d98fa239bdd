"""Statement compilation for the templatejs compiler.

Provides mixins for lowering statement nodes to JavaScript statements.

The statements package is organized into logical modules:
- basic: Text, actions and variable declarations
- control_flow: if, range, with, break, continue
- template_structure: template invocation

Uses inline TYPE_CHECKING declarations for host attributes.

"""

from __future__ import annotations

from templatejs.compiler.statements.basic import BasicStatementMixin
from templatejs.compiler.statements.control_flow import ControlFlowMixin
from templatejs.compiler.statements.template_structure import TemplateStructureMixin


class StatementCompilationMixin(
    BasicStatementMixin,
    ControlFlowMixin,
    TemplateStructureMixin,
):
    """Combined mixin for compiling all statement types.

    This class combines all statement compilation mixins into a single
    interface that can be inherited by the JSCompiler class.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks in each individual mixin.

    """
