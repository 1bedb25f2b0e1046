from pydantic import BaseModel, ConfigDict, Field


class Holding(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    symbol: str
    purchase_price: float = Field(alias="purchasePrice", ge=0)
    quantity: float = Field(ge=0)
    exchange: str | None = None
    sector: str = "Unclassified"


class HoldingPerformance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    symbol: str
    quantity: float
    purchase_price: float = Field(alias="purchasePrice")
    cmp: float | None = None
    investment: float
    present_value: float | None = Field(default=None, alias="presentValue")
    gain_loss: float | None = Field(default=None, alias="gainLoss")
    portfolio_percent: float = Field(alias="portfolioPercent")
    error: bool = False


class SectorSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sector: str
    investment: float
    present_value: float = Field(alias="presentValue")
    gain_loss: float = Field(alias="gainLoss")
    sector_percent: float = Field(alias="sectorPercent")
    holdings: list[HoldingPerformance]


class PortfolioSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_investment: float = Field(alias="totalInvestment")
    total_present_value: float = Field(alias="totalPresentValue")
    total_gain_loss: float = Field(alias="totalGainLoss")
    sectors: list[SectorSummary]


class PortfolioSummaryRequest(BaseModel):
    holdings: list[Holding]
