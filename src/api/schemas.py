from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import Envelope

# --- Requests ---
# Scalar fields stay untyped so the ledger applies its own number rules
# (and answers 400) instead of pydantic coercing "12" into 12.


class EnvelopeCreateRequest(BaseModel):
    title: Any = Field(None, description="Envelope label")
    budget: Any = Field(None, description="Starting balance, >= 0")


class EnvelopeUpdateRequest(BaseModel):
    title: Any = Field(None, description="New label")
    budget: Any = Field(None, description="New balance, >= 0")


class AmountRequest(BaseModel):
    amount: Any = Field(None, description="Amount to move, > 0")


class DistributionEntry(BaseModel):
    id: Any = Field(None, description="Envelope ID")
    percentage: Any = Field(None, description="Share of the amount, in percent")


class DistributeRequest(BaseModel):
    amount: Any = Field(None, description="Lump sum to split, > 0")
    distributions: list[DistributionEntry] | None = None


# --- Responses ---


class EnvelopeResponse(BaseModel):
    id: int
    title: str
    budget: float

    @classmethod
    def from_envelope(cls, envelope: Envelope) -> "EnvelopeResponse":
        return cls(id=envelope.id, title=envelope.title, budget=envelope.budget)


class EnvelopeListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_budget: float = Field(alias="totalBudget")
    envelopes: list[EnvelopeResponse]


class EnvelopeDeleteResponse(BaseModel):
    message: str
    envelope: EnvelopeResponse


class TransferResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    source: EnvelopeResponse = Field(alias="from")
    destination: EnvelopeResponse = Field(alias="to")


class DistributionResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    added_amount: float = Field(alias="addedAmount")
    new_budget: float = Field(alias="newBudget")


class DistributeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    total_distributed: float = Field(alias="totalDistributed")
    distributions: list[DistributionResultResponse]


class ErrorResponse(BaseModel):
    detail: str
