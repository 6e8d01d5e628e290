from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class SelectionMethod(str, Enum):
    """Selection procedures that can be chosen through configuration."""

    ELITE = "elite"
    TOURNAMENT = "tournament"
    ROULETTE = "roulette"
    LEXICASE = "lexicase"
    ECO = "eco"


class EliteConfig(BaseModel):
    method: Literal["elite"] = "elite"
    e_count: int = Field(default=1, ge=1, description="Distinct organisms to copy")
    copy_count: int = Field(default=1, ge=1, description="Copies per elite")


class TournamentConfig(BaseModel):
    method: Literal["tournament"] = "tournament"
    t_size: int = Field(default=7, ge=1, description="Entrants per tournament")
    tourny_count: int = Field(default=1, ge=1, description="Tournaments per call")


class RouletteConfig(BaseModel):
    method: Literal["roulette"] = "roulette"
    count: int = Field(default=1, ge=1, description="Offspring drawn per call")


class LexicaseConfig(BaseModel):
    method: Literal["lexicase"] = "lexicase"
    repro_count: int = Field(default=1, ge=1, description="Offspring per call")
    max_funs: int = Field(
        default=0,
        ge=0,
        description="Fitness functions tried per offspring (0 = all, as a permutation)",
    )


class EcoConfig(BaseModel):
    method: Literal["eco"] = "eco"
    pool_sizes: list[float] | float = Field(
        default=100.0,
        description="Resource per supplemental function, or one size for all",
    )
    t_size: int = Field(default=7, ge=1, description="Entrants per tournament")
    tourny_count: int = Field(default=1, ge=1, description="Tournaments per call")

    @field_validator("pool_sizes")
    @classmethod
    def validate_pool_sizes(cls, v):
        sizes = v if isinstance(v, list) else [v]
        for size in sizes:
            if size < 0:
                raise ValueError(f"Pool sizes must be non-negative, got {size}")
        return v


SelectionConfig = Annotated[
    Union[EliteConfig, TournamentConfig, RouletteConfig, LexicaseConfig, EcoConfig],
    Field(discriminator="method"),
]


class SelectionSettings(BaseModel):
    """Top-level selection configuration: generator seed plus one method."""

    seed: int = Field(
        default=-1, description="Generator seed; values <= 0 seed from the clock"
    )
    selection: SelectionConfig = Field(default_factory=TournamentConfig)
