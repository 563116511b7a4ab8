"""Carbon price point model."""

from datetime import datetime

from pydantic import Field

from .base import DBModel

SIMULATED_SOURCE = "realistic_simulation"


class PricePoint(DBModel):
    """One observed or simulated price for a market."""

    market: str = Field(..., description="Market code")
    price: float = Field(..., description="Price per allowance", ge=0)
    volume: int = Field(0, description="Traded volume", ge=0)
    currency: str = Field(..., description="ISO currency code")
    timestamp: datetime = Field(..., description="Observation time")
    data_source: str = Field(..., description="scraping_<source> or realistic_simulation")

    @property
    def is_simulated(self) -> bool:
        """Whether the point was synthesized rather than scraped."""
        return self.data_source == SIMULATED_SOURCE
