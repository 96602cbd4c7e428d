"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, Field

from portrait_stage.models import Entity, StageConfig


class CreateSession(BaseModel):
    session_id: str = ""
    title: str = ""
    bot_name: str = ""
    config: StageConfig = Field(default_factory=StageConfig)


class ScanBody(BaseModel):
    text: str
    balance_regex: str | None = None


class ScanHit(BaseModel):
    entity: Entity
    candidate: str
    remainder: str
    line_no: int
