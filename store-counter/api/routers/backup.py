"""
Backup API Endpoints.

Download the catalog and sale log as a JSON file, or replace them from one.
"""

import json

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_counter
from api.models import ErrorResponse, ImportResponse
from domain.errors import MalformedImport
from services.backup_service import backup_filename
from services.counter_service import StoreCounter

router = APIRouter()


@router.get(
    "/backup",
    summary="Export Data",
    description="Download products and sales as a JSON backup file.",
    response_class=Response,
)
def export_backup(counter: StoreCounter = Depends(get_counter)):
    """
    Export the catalog and the sale log.

    **Response body:**
    ```json
    {"products": [...], "sales": [...], "exportDate": "2025-01-01T12:00:00+00:00"}
    ```
    """
    now = counter.now()
    data = counter.export(now)
    return Response(
        content=json.dumps(data, indent=2, ensure_ascii=False),
        media_type="application/json",
        headers={
            "Content-Disposition": f"attachment; filename={backup_filename(now)}"
        }
    )


@router.post(
    "/backup",
    response_model=ImportResponse,
    summary="Import Data",
    responses={400: {"model": ErrorResponse}},
)
async def import_backup(request: Request, counter: StoreCounter = Depends(get_counter)):
    """
    Replace products and/or sales from a backup file (raw JSON body).

    - A `products` key replaces the catalog; a `sales` key replaces the sale log.
    - A missing key leaves that collection unchanged.
    - The undo history is always cleared.
    - A malformed file is rejected and nothing changes.
    """
    body = await request.body()
    try:
        # validation and file writes block; keep them off the event loop
        result = await run_in_threadpool(counter.import_backup, body)
    except MalformedImport as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImportResponse(
        products_replaced=result.products_replaced,
        sales_replaced=result.sales_replaced,
        product_count=result.product_count,
        sale_count=result.sale_count,
        message="Data imported successfully",
    )
