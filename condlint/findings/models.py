# Pydantic data models for lint findings: Finding, Location, severities.

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

# Recognised severities, most to least serious
SEVERITIES = ("error", "warning", "style", "info")


class Location(BaseModel):
    """Where in the source a finding was reported (file, line, column)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)
    snippet: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}


class Finding(BaseModel):
    """A single issue reported by a rule, with a hint on how to fix it."""

    rule_id: str
    message: str
    location: Location
    help: Optional[str] = None
    severity: str = Field(default="style", description="one of error, warning, style, info")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}
