from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.errors import InvalidRequestError, QuoteProviderError
from app.schemas.portfolio import PortfolioSummaryRequest
from app.schemas.quote import QuotesResponse, parse_symbols_param
from app.services.portfolio import summarize_portfolio

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


@router.get('/portfolio')
def get_portfolio_quotes(request: Request, symbols: str = ''):
    service = request.app.state.quote_service
    try:
        results = service.get_quotes(parse_symbols_param(symbols))
    except InvalidRequestError as exc:
        return _error(400, str(exc))
    return QuotesResponse(results=results).model_dump(by_alias=True)


@router.get('/quote')
def get_quote(request: Request, symbol: str = ''):
    service = request.app.state.quote_service
    try:
        row = service.get_quote(symbol)
    except InvalidRequestError as exc:
        return _error(400, str(exc))
    except QuoteProviderError:
        return _error(500, 'Failed to fetch stock data')
    return row.model_dump(by_alias=True)


@router.post('/portfolio/summary')
def get_portfolio_summary(req: PortfolioSummaryRequest, request: Request):
    service = request.app.state.quote_service
    try:
        quotes = service.get_quotes(h.symbol for h in req.holdings)
    except InvalidRequestError as exc:
        return _error(400, str(exc))
    return summarize_portfolio(req.holdings, quotes).model_dump(by_alias=True)


@router.get('/metrics/quote')
def quote_metrics(request: Request):
    metrics = request.app.state.quote_service.metrics()
    metrics['poll_interval_sec'] = request.app.state.get_settings().QUOTE_POLL_INTERVAL_SEC
    return metrics
