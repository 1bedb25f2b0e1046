from __future__ import annotations

from app.schemas.portfolio import Holding, HoldingPerformance, PortfolioSummary, SectorSummary
from app.schemas.quote import FetchResult, normalize_symbol


def _percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def summarize_portfolio(holdings: list[Holding], quotes: dict[str, FetchResult]) -> PortfolioSummary:
    """Group holdings by sector and value them at the quoted market price.

    Holdings without a price count toward investment but not toward present
    value or gain/loss.
    """
    total_investment = sum(h.purchase_price * h.quantity for h in holdings)

    by_sector: dict[str, list[HoldingPerformance]] = {}
    for holding in holdings:
        quote = quotes.get(normalize_symbol(holding.symbol))
        cmp = quote.cmp if quote is not None else None
        investment = holding.purchase_price * holding.quantity
        present_value = cmp * holding.quantity if cmp is not None else None
        by_sector.setdefault(holding.sector, []).append(
            HoldingPerformance(
                name=holding.name,
                symbol=normalize_symbol(holding.symbol),
                quantity=holding.quantity,
                purchase_price=holding.purchase_price,
                cmp=cmp,
                investment=investment,
                present_value=present_value,
                gain_loss=present_value - investment if present_value is not None else None,
                portfolio_percent=_percent(investment, total_investment),
                error=quote is None or quote.error,
            )
        )

    sectors: list[SectorSummary] = []
    for sector, rows in by_sector.items():
        investment = sum(r.investment for r in rows)
        priced = [r for r in rows if r.present_value is not None]
        present_value = sum(r.present_value for r in priced)
        sectors.append(
            SectorSummary(
                sector=sector,
                investment=investment,
                present_value=present_value,
                gain_loss=sum(r.gain_loss for r in priced),
                sector_percent=_percent(investment, total_investment),
                holdings=rows,
            )
        )

    return PortfolioSummary(
        total_investment=total_investment,
        total_present_value=sum(s.present_value for s in sectors),
        total_gain_loss=sum(s.gain_loss for s in sectors),
        sectors=sectors,
    )
