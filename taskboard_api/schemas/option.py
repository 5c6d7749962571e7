from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class OptionReorderRequest(BaseModel):
    """
    Drag-and-drop reorder of select options; optionIds[i] receives orders[i].

    Element types are checked by the reorder service so that every problem is
    reported together.
    """
    optionIds: Any = Field(
        ...,
        description="The IDs of the options to reorder",
        examples=[["c94948db-f38f-47f5-8fae-95db44be3288", "21228730-3834-47f5-82fc-a6d1d2240c47"]],
    )
    orders: Any = Field(..., description="The new orders of the options", examples=[[1, 2]])
