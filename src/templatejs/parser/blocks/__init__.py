"""Action parsing mixins for the templatejs parser.

- control_flow: if, range, with, else, break, continue
- template_structure: define, block, template
"""

from __future__ import annotations

from templatejs.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from templatejs.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "ControlFlowBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
]
