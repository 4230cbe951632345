"""
Request dependencies.

Routers receive the application's StoreCounter through `get_counter`, never
through a module global.
"""

from fastapi import Request

from services.counter_service import StoreCounter


def get_counter(request: Request) -> StoreCounter:
    return request.app.state.counter
