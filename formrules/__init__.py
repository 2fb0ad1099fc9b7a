"""Pure form rule engine for the monitoring console.

This package contains deterministic, testable rules that operate on in-memory
form values and return DTOs: numeric parsing, field visibility, dependent
field state machines, render state projections and graph validation. It must
not import Django or perform any database I/O.
"""

from .graph_validator import validate_graph_config
from .render_state import graph_form_state, media_type_form_state

__all__ = ["graph_form_state", "media_type_form_state", "validate_graph_config"]
