"""
Engines: SQL placeholder templates and the form submission writer.
"""

from app.engines.sql import (
    compile_template,
    synthesize_insert,
    write_submission,
)

__all__ = [
    "compile_template",
    "synthesize_insert",
    "write_submission",
]
