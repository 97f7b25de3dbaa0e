from pydantic import BaseModel

from app.schemas.session import SessionCompany, SessionUser


class SetupResponse(BaseModel):
    message: str
    company: SessionCompany
    user: SessionUser
