"""Package catalog response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PackageData(BaseModel):
    """``GET /data/package/<owner>/<repo>``."""

    model_config = ConfigDict(populate_by_name=True)

    gh_url: str = Field(alias="ghUrl")
    version: str


class SearchSource(BaseModel):
    git_clone_url: str
    latest_version: str


class SearchHit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: SearchSource = Field(alias="_source")


class SearchHits(BaseModel):
    hits: list[SearchHit]


class SearchData(BaseModel):
    hits: SearchHits


class SearchResponse(BaseModel):
    """``GET /api/search/<query>`` — hits are nested two levels deep."""

    data: SearchData
