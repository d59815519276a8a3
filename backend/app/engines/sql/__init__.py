"""
Named-placeholder SQL templates and the form submission writer.

Exports: compile_template, parse_placeholders, bind, synthesize_insert,
write_submission.
"""

from app.engines.sql.binder import CoercionRule, bind
from app.engines.sql.executor import write_submission
from app.engines.sql.synthesizer import synthesize_insert
from app.engines.sql.template import (
    CompiledStatement,
    Placeholder,
    compile_template,
    parse_placeholders,
)

__all__ = [
    "CoercionRule",
    "CompiledStatement",
    "Placeholder",
    "bind",
    "compile_template",
    "parse_placeholders",
    "synthesize_insert",
    "write_submission",
]
