"""
Sales API Endpoints.

Record a sale, undo the most recent sales (up to 50 back), and clear the
sale history.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_counter
from api.models import ClearSalesResponse, ErrorResponse, SaleRecordedResponse, SaleRequest, SaleResponse, UndoResponse
from domain.errors import ProductNotFound
from domain.money import format_currency
from services.counter_service import StoreCounter

router = APIRouter()


@router.post(
    "/sales",
    response_model=SaleRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record Sale",
    responses={404: {"model": ErrorResponse}},
)
def record_sale(request: SaleRequest, counter: StoreCounter = Depends(get_counter)):
    """
    Record one sale of a catalog product at the current time.

    The sale stores a copy of the product's name, cost and price, so later
    catalog edits do not change it. The sale becomes the newest undo entry.
    """
    sale, depth = counter.record_sale(request.product_id)
    if sale is None:
        raise HTTPException(status_code=404, detail=str(ProductNotFound(request.product_id)))

    return SaleRecordedResponse(
        sale=SaleResponse.from_domain(sale),
        undo_depth=depth,
        message=f"Sold: {sale.product_name} - {format_currency(sale.price)}",
    )


@router.get(
    "/sales/undo",
    response_model=UndoResponse,
    summary="Undo Status",
)
def undo_status(counter: StoreCounter = Depends(get_counter)):
    """Report how many sales can currently be undone."""
    depth = counter.undo_depth
    return UndoResponse(
        undone=None,
        undo_depth=depth,
        message=f"{depth} sale(s) can be undone" if depth else "Nothing to undo",
    )


@router.post(
    "/sales/undo",
    response_model=UndoResponse,
    summary="Undo Last Sale",
)
def undo_last_sale(counter: StoreCounter = Depends(get_counter)):
    """
    Undo the most recent undoable sale.

    Always succeeds. `undone` is null when the undo history was empty or the
    popped entry no longer matched a sale.
    """
    sale, depth = counter.undo_last_sale()
    return UndoResponse(
        undone=SaleResponse.from_domain(sale) if sale is not None else None,
        undo_depth=depth,
        message=f"Undone: {sale.product_name}" if sale is not None else "Nothing undone",
    )


@router.delete(
    "/sales",
    response_model=ClearSalesResponse,
    summary="Clear All Sales",
    responses={400: {"model": ErrorResponse}},
)
def clear_all_sales(
    confirm: bool = Query(False, description="Must be true; clearing cannot be undone"),
    counter: StoreCounter = Depends(get_counter),
):
    """
    Erase every recorded sale and the undo history.

    **This cannot be undone.** The request must carry `confirm=true`.
    """
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Clearing all sales cannot be undone. Repeat the request with confirm=true."
        )

    removed = counter.clear_sales()
    return ClearSalesResponse(removed=removed, message="All sales cleared")
