from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence

Side = Literal["buy", "sell"]

@dataclass
class OrderRequest:
    symbol: str
    side: Side
    quantity: float
    order_type: str = "market"

@dataclass
class OrderResult:
    order_id: str
    executed_qty: float
    avg_price: float
    status: str


class MarketDataSource(Protocol):
    def fetch_chart_data(self, symbol: str, timeframe: str) -> Sequence[Any]:
        """Candles {time, open, high, low, close, volume}, most recent last."""
        ...


class OrderGateway(Protocol):
    def place_order(self, order: OrderRequest) -> OrderResult:
        ...
