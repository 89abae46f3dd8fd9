"""Request and response models for the HTTP surface."""
from pydantic import BaseModel, ConfigDict


class SymbolEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    meaning: str


class DreamRequest(BaseModel):
    dream: str = ""
    school: str = ""


class DreamResponse(BaseModel):
    success: bool = True
    dream: str
    school: str
    analysis: str
    symbols: list[SymbolEntry]


class ReportRequest(BaseModel):
    dream: str = ""
    school: str = ""
    analysis: str = ""
    symbols: list[SymbolEntry] = []


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: str | None = None
