from pydantic import BaseModel, Field

from pyping.apps.constants import DEFAULT_FRESHNESS


class Config(BaseModel):
    prefix: str = Field(..., description="Name prefix to serve")
    freshness: int | None = Field(
        DEFAULT_FRESHNESS, ge=0, description="FreshnessSeconds, None - omit")
    daemon: bool = False
