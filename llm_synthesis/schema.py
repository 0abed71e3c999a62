"""Structured output schemas for LLM responses."""

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class QueryBucket(BaseModel):
    """One group of natural-language database queries."""

    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(min_length=1)
    description: str = ""
    queries: List[str] = Field(min_length=1)


class QueryBuckets(BaseModel):
    """Market-analysis and lookalike-audience query groups."""

    model_config = ConfigDict(populate_by_name=True)

    market_intelligence: QueryBucket = Field(
        validation_alias=AliasChoices("marketIntelligence", "market_intelligence"),
        serialization_alias="marketIntelligence",
    )
    growth_audiences: QueryBucket = Field(
        validation_alias=AliasChoices("growthAudiences", "growth_audiences"),
        serialization_alias="growthAudiences",
    )


class SelectedVariableOutput(BaseModel):
    """One variable chosen by the model."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, validation_alias=AliasChoices("variable", "name"))
    category: Optional[str] = None
    rationale: str = ""


class VariableSelectionOutput(BaseModel):
    variables: List[SelectedVariableOutput]


class GuidanceItemOutput(BaseModel):
    """Model-suggested threshold and label for one variable."""

    model_config = ConfigDict(str_strip_whitespace=True)

    variable: str = Field(min_length=1, validation_alias=AliasChoices("variable", "name"))
    threshold: float
    label: str = Field(min_length=1)
    rationale: Optional[str] = None


class GuidanceOutput(BaseModel):
    guidance: List[GuidanceItemOutput]
