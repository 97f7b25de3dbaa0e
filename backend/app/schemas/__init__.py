from app.schemas.common import MessageResponse
from app.schemas.company import CompanyCreate, CompanyUpdate, CompanyResponse
from app.schemas.user import UserCreate, UserUpdate, UserResponse, LoginRequest
from app.schemas.session import RequestContext, SessionResponse, CurrentUserResponse
from app.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from app.schemas.event import EventCreate, EventUpdate, EventFilters, EventResponse
from app.schemas.ticket import (
    TicketCreate, TicketUpdate, TicketFilters, TicketCloneOptions,
    TicketBatchCloneRequest, StockUpdateRequest, TicketResponse, TicketBatchCloneResponse,
)
from app.schemas.cart import (
    CartReplaceRequest, CartQuantityUpdate, ShippingRequest, CartResponse,
    CheckoutRequest, CheckoutCreatedResponse, CheckoutResponse,
)
from app.schemas.setup import SetupResponse

__all__ = [
    "MessageResponse",
    "CompanyCreate", "CompanyUpdate", "CompanyResponse",
    "UserCreate", "UserUpdate", "UserResponse", "LoginRequest",
    "RequestContext", "SessionResponse", "CurrentUserResponse",
    "ClientCreate", "ClientUpdate", "ClientResponse",
    "EventCreate", "EventUpdate", "EventFilters", "EventResponse",
    "TicketCreate", "TicketUpdate", "TicketFilters", "TicketCloneOptions",
    "TicketBatchCloneRequest", "StockUpdateRequest", "TicketResponse", "TicketBatchCloneResponse",
    "CartReplaceRequest", "CartQuantityUpdate", "ShippingRequest", "CartResponse",
    "CheckoutRequest", "CheckoutCreatedResponse", "CheckoutResponse",
    "SetupResponse",
]
