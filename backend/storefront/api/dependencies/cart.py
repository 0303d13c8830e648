from fastapi import Request

from storefront.services.cart_service import CartStore


def get_cart_store(request: Request) -> CartStore:
    """The process-wide cart built in the app lifespan."""
    return request.app.state.cart_store
