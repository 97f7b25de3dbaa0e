from app.models.company import Company
from app.models.user import User
from app.models.session import UserSession
from app.models.client import Client
from app.models.event import Event
from app.models.ticket import Ticket
from app.models.cart import CartItem
from app.models.checkout import Checkout

__all__ = [
    "Company", "User", "UserSession", "Client",
    "Event", "Ticket", "CartItem", "Checkout",
]
