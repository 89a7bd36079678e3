"""
Forgotten blanks schemas.
"""
from pydantic import BaseModel, Field, StrictInt
from typing import Dict, List


class ForgottenBlanksResponse(BaseModel):
    forgotten_blanks: List[int]


class UpdateForgottenBlanksRequest(BaseModel):
    """The full set of blanks currently marked forgotten."""
    forgotten_blanks: List[StrictInt] = Field(..., description="Token indices marked forgotten")


class BlankStatsResponse(BaseModel):
    """Current forgotten set plus lifetime forget counts per blank index."""
    forgotten_blanks: List[int]
    stats: Dict[int, int]
