from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from resale_ledger.schemas.store import StoreRead


class ProfitStatsRead(BaseModel):
    total_profit: float = Field(alias="totalProfit")
    total_revenue: float = Field(alias="totalRevenue")
    total_cost: float = Field(alias="totalCost")
    profit_margin: float = Field(alias="profitMargin")
    total_items: int = Field(alias="totalItems")
    sold_items: int = Field(alias="soldItems")
    unsold_items: int = Field(alias="unsoldItems")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TimeRangeStatsRead(BaseModel):
    profit: float
    revenue: float
    cost: float
    items_sold: int = Field(alias="itemsSold")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PeriodStatsRead(TimeRangeStatsRead):
    start: date
    end: date
    avg_profit: float = Field(alias="avgProfit")


class PeriodSummaryRead(BaseModel):
    week: PeriodStatsRead
    year: PeriodStatsRead


class ProductProfitabilityRead(BaseModel):
    product_id: int
    product_name: str
    store_name: str
    profit: float
    profit_margin: float = Field(alias="profitMargin")
    purchase_price: float
    sale_price: float

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StoreStatsRead(BaseModel):
    store: StoreRead
    profit: float
    items: int

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
