from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class SingleValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    value: str


class ListValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    values: Tuple[str, ...]


Value = Annotated[Union[SingleValue, ListValue], Field(discriminator="kind")]

# key -> value, insertion ordered
Table = Dict[str, Union[SingleValue, ListValue]]


class ReportItem(BaseModel):
    line: Optional[int] = None
    key: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ReportSummary(BaseModel):
    lines: int = 0
    entries: int = 0
    comments: int = 0
    warnings: int = 0
    errors: int = 0


class ParseReport(BaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    encoding: Optional[str] = None
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ParseResult(BaseModel):
    table: Dict[str, Value] = Field(default_factory=dict)
    report: ParseReport = Field(default_factory=ParseReport)
