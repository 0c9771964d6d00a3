from pydantic import BaseModel
from typing import Optional


class DeletedPercentageReport(BaseModel):
    total: int
    deleted: int
    percentage: int


class NonDeletedPercentageReport(BaseModel):
    count: int
    percentage: float


class CategoryShare(BaseModel):
    category: Optional[str]
    count: int
    percentage: float
