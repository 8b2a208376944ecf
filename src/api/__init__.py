"""API module - route handlers and common dependencies."""

from fastapi import FastAPI

from src.api.deps import CurrentUser

__all__ = [
    "CurrentUser",
    "register_routers",
]


def register_routers(app: FastAPI) -> None:
    """Register all API routers to the application.

    Args:
        app: FastAPI application instance
    """
    # Donor accounts
    from src.api.users import router as users_router

    app.include_router(users_router, prefix="/api")

    # Donations (initiation, IPN, browser redirects)
    from src.api.payment import router as payment_router

    app.include_router(payment_router, prefix="/api")

    # Contact form
    from src.api.contact import router as contact_router

    app.include_router(contact_router, prefix="/api")
