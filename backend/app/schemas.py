"""
Pydantic schemas for the form submission API.

Body of POST /api/submit: {schema, destination, data}.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FormProperty(BaseModel):
    """One field of a form schema; keywords other than ``type`` are kept but unused."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="string", description="Placeholder type token for the column.")


class FormSchema(BaseModel):
    """JSON-schema-like form description. Property order decides column order."""

    model_config = ConfigDict(extra="allow")

    type: str
    properties: dict[str, FormProperty] = Field(default_factory=dict)


class Destination(BaseModel):
    url: str = Field(..., min_length=1, description="e.g. jdbc:mysql://host:3306/db?user=u&password=p")
    table: str = Field(..., min_length=1, description="Target table, used verbatim.")


class Submission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # "schema" shadows a BaseModel attribute; keep it as the wire name only.
    form_schema: FormSchema = Field(..., alias="schema")
    destination: Destination
    data: dict[str, Any]
