import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_TRUE = {"true", "yes", "y", "required", "1"}
_FALSE = {"false", "no", "n", "not required", "none", "0"}


def parse_fee(value: Any) -> Optional[float]:
    """
    Dollar amount from an LLM answer: 125, "125", "$1,250.00", "$50 (online)".

    Returns None when no number can be read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    match = _NUMBER.search(str(value).replace(",", "").replace("$", ""))
    return float(match.group()) if match else None


def parse_flag(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


class _Answer(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    state: Optional[str] = None
    entity_type: Optional[str] = Field(None, alias="entityType")
    formation_fee: Optional[float] = Field(None, alias="formationFee")
    annual_report_required: Optional[bool] = Field(None, alias="annualReportRequired")

    @field_validator("formation_fee", mode="before")
    @classmethod
    def coerce_fee(cls, value):
        return parse_fee(value)

    @field_validator("annual_report_required", mode="before")
    @classmethod
    def coerce_flag(cls, value):
        return parse_flag(value)


class OpenAIAnswer(_Answer):
    """JSON object requested from OpenAI (flat annual-report fields)."""
    annual_filing_fee: Optional[float] = Field(None, alias="annualFilingFee")
    frequency: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    late_fee: Optional[float] = Field(None, alias="lateFee")
    notes: Optional[str] = None
    source: Optional[str] = None

    @field_validator("annual_filing_fee", "late_fee", mode="before")
    @classmethod
    def coerce_fees(cls, value):
        return parse_fee(value)

    @field_validator("frequency", "due_date", "notes", "source", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return None if value is None else str(value)


class GeminiAnnualFilingDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    fee: Optional[float] = None
    frequency: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    penalty: Optional[str] = None

    @field_validator("fee", mode="before")
    @classmethod
    def coerce_fee(cls, value):
        return parse_fee(value)

    @field_validator("frequency", "due_date", "penalty", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return None if value is None else str(value)


class GeminiAnswer(_Answer):
    """JSON object requested from Gemini (annual-report fields nested)."""
    annual_filing_details: Optional[GeminiAnnualFilingDetails] = Field(None, alias="annualFilingDetails")
    official_source: Optional[str] = Field(None, alias="officialSource")

    @field_validator("annual_filing_details", mode="before")
    @classmethod
    def coerce_details(cls, value):
        return value if isinstance(value, dict) else None

    @field_validator("official_source", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return None if value is None else str(value)

    @property
    def annual_fee(self) -> Optional[float]:
        # A missing details block means no fee was quoted
        if self.annual_filing_details is None:
            return 0.0
        return self.annual_filing_details.fee


class ConsensusData(BaseModel):
    state: Optional[str] = None
    entityType: Optional[str] = None
    formationFee: Optional[int] = None
    annualReportRequired: bool = False
    annualFilingFee: int = 0
    frequency: Optional[str] = None
    dueDate: Optional[str] = None
    lateFee: float = 0
    sources: List[str] = Field(default_factory=list)


class CombinationResult(BaseModel):
    """Outcome for one state / entity type pair."""
    status: str  # validated | discrepancy | incomplete | error
    issues: List[str] = Field(default_factory=list)
    consensusData: Optional[ConsensusData] = None
    error: Optional[str] = None

    def to_report(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
