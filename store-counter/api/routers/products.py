"""
Products API Endpoints.

Catalog management: list, add, edit and delete sellable products.
Editing or deleting a product never changes recorded sales.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_counter
from api.models import ErrorResponse, ProductListResponse, ProductRequest, ProductResponse
from services.counter_service import StoreCounter

router = APIRouter()


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List Products",
)
def list_products(counter: StoreCounter = Depends(get_counter)):
    """Return the catalog in display order."""
    items = [ProductResponse.from_domain(p) for p in counter.list_products()]
    return ProductListResponse(items=items, total_count=len(items))


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Product",
    responses={400: {"model": ErrorResponse}},
)
def add_product(request: ProductRequest, counter: StoreCounter = Depends(get_counter)):
    """
    Add a product to the catalog under a freshly generated ID.

    **Example request:**
    ```json
    {"name": "Muffin", "cost": "1.20", "price": "3.25", "color": "#AA7744"}
    ```
    """
    try:
        product = counter.add_product(
            name=request.name,
            cost=request.cost,
            price=request.price,
            color=request.color,
            image=request.image,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProductResponse.from_domain(product)


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Edit Product",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def edit_product(product_id: str, request: ProductRequest, counter: StoreCounter = Depends(get_counter)):
    """
    Edit a product in place. Omitting `image` keeps the current image.

    Sales already recorded keep the name, cost and price they were sold at.
    """
    try:
        product = counter.update_product(
            product_id,
            name=request.name,
            cost=request.cost,
            price=request.price,
            color=request.color,
            image=request.image,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if product is None:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return ProductResponse.from_domain(product)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Product",
    responses={404: {"model": ErrorResponse}},
)
def delete_product(product_id: str, counter: StoreCounter = Depends(get_counter)):
    """Remove a product from the catalog. Its past sales stay in the log."""
    if not counter.delete_product(product_id):
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
