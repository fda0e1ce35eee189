"""
Report Schemas for Portal Statistics and Exports

Defines aggregated statistics and the neutral document sections handed to
the exporter.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class CategoryCount(BaseModel):
    """One category of an aggregated dimension"""

    category: str = Field(..., description="Category label")
    count: int = Field(0, description="Number of records in the category")
    percentage: float = Field(0.0, description="Share of the total, one decimal place")


class ReportStats(BaseModel):
    """Per-dimension counts over one collection snapshot"""

    total: int = Field(0, description="Number of records aggregated")
    dimensions: Dict[str, List[CategoryCount]] = Field(
        default_factory=dict, description="Categories per dimension, first-appearance order"
    )

    def dimension(self, name: str) -> List[CategoryCount]:
        return self.dimensions.get(name, [])

    def count_of(self, dimension: str, category: str) -> int:
        for item in self.dimension(dimension):
            if item.category == category:
                return item.count
        return 0


class ReportSection(BaseModel):
    """A titled block of a rendered report"""

    heading: str = Field(..., description="Section heading")
    lines: List[str] = Field(default_factory=list, description="Summary lines")
    table: Optional[List[List[str]]] = Field(
        None, description="Table rows; the first row holds the column labels"
    )


class ChartSpec(BaseModel):
    """A pie chart over one aggregated dimension"""

    title: str = Field(..., description="Chart title")
    labels: List[str] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)
