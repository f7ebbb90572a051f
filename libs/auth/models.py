from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Identity carried by a verified bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    customer_id: int = Field(..., alias="id")
    email: Optional[EmailStr] = None
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
