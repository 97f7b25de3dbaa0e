"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import (
    sessions, users, companies, clients, events, tickets, carts, checkout, setup,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(sessions.router)
api_router.include_router(users.router)
api_router.include_router(companies.router)
api_router.include_router(clients.router)
api_router.include_router(events.router)
api_router.include_router(tickets.router)
api_router.include_router(carts.router)
api_router.include_router(checkout.router)
api_router.include_router(setup.router)
