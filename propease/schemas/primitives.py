from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, condecimal
from pydantic.alias_generators import to_camel


# --- Numeric primitives ---
Percentage = Annotated[Decimal, condecimal(ge=0, le=100, max_digits=5, decimal_places=2)]


class CamelModel(BaseModel):
    """
    Request bodies use the camelCase keys of the browser client
    (`clientName`, `propertyId`); snake_case names are accepted too.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def patch(self) -> dict:
        """Only the fields the caller actually sent, snake_case."""
        return self.model_dump(exclude_unset=True)
