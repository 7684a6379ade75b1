from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class LedgerRules(BaseModel):
    percentage_tolerance: float = Field(default=0.01, ge=0)
    atomic_distribute: bool = True
    max_title_length: int = Field(default=200, gt=0)

class ApiRules(BaseModel):
    title: str = "Envelope Budget API"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE"])

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    log_level: LogLevel = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, gt=0, lt=65536)

class Rules(BaseModel):
    project: ProjectRules
    ledger: LedgerRules = Field(default_factory=LedgerRules)
    api: ApiRules = Field(default_factory=ApiRules)
    ops: OpsRules = Field(default_factory=OpsRules)
