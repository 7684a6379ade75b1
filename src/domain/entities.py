from pydantic import BaseModel, Field

# --- Envelopes ---


class Envelope(BaseModel):
    id: int
    title: str
    budget: float = Field(ge=0)


class LedgerSnapshot(BaseModel):
    total_budget: float
    envelopes: list[Envelope] = Field(default_factory=list)
