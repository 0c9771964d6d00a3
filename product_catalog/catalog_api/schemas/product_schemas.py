from pydantic import BaseModel, Field
from typing import Optional


class Pagination(BaseModel):
    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=5, ge=1, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ProductFilters(BaseModel):
    name: Optional[str] = Field(default=None, description="Case-insensitive substring of the product name")
    category: Optional[str] = Field(default=None, description="Exact category")
    min_price: Optional[float] = Field(default=None, ge=0, description="Inclusive lower price bound")
    max_price: Optional[float] = Field(default=None, ge=0, description="Inclusive upper price bound")
