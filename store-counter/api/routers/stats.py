"""
Stats API Endpoints.

Revenue, cost and profit totals for the current day, week or month.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_counter
from api.models import ErrorResponse, SummaryResponse
from domain.period import Period
from services.counter_service import StoreCounter

router = APIRouter()


@router.get(
    "/stats",
    response_model=SummaryResponse,
    summary="Sales Summary",
    description="Totals since the start of the current day, week (Sunday) or month.",
    responses={400: {"model": ErrorResponse}},
)
def get_summary(
    period: str = Query("daily", description="One of 'daily', 'weekly', 'monthly'"),
    counter: StoreCounter = Depends(get_counter),
):
    """
    Summarize sales for the requested period.

    Totals are recomputed from the full sale log on every request.
    `recent_sales` holds up to 20 sales from the window, newest first.

    **Example usage:**
    - Today: `GET /api/v1/stats`
    - This week: `GET /api/v1/stats?period=weekly`
    """
    try:
        selected = Period.parse(period)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SummaryResponse.from_domain(counter.summary(selected))
