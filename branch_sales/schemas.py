from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductRecord(BaseModel):
    """
    One product line as published by a branch.
    Price and quantity are taken as-is; a missing or non-numeric value
    simply produces a NaN revenue downstream.
    """

    model_config = ConfigDict(
        populate_by_name=True, frozen=True, coerce_numbers_to_str=True
    )

    name: Optional[str] = None
    unit_price: Any = Field(default=None, alias="unitPrice")
    sold: Any = None


class BranchDataset(BaseModel):
    """The document served by a single branch: `{"products": [...]}`."""

    model_config = ConfigDict(frozen=True)

    products: list[ProductRecord] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _missing_products_is_empty(cls, value):
        return [] if value is None else value


class AggregatedProduct(BaseModel):
    name: Optional[str]
    revenue: float


class TableRow(BaseModel):
    name: Optional[str]
    formatted_revenue: str


class TableView(BaseModel):
    """
    Everything the presenter needs for one render.
    `error` and `rows` are mutually exclusive; while loading, both are empty.
    """

    rows: list[TableRow] = Field(default_factory=list)
    total: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None
    # True when ready but the current query matches nothing.
    empty: bool = False
