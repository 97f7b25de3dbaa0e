"""
Shared schema helpers.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Monetary values are stored as NUMERIC(10,2) and rendered as JSON numbers
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class MessageResponse(BaseModel):
    message: str
