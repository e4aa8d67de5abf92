"""
API Pydantic Models

Request bodies for the shopflow endpoints.
"""
from pydantic import BaseModel, Field

from shopflow.cart import Direction


# ==================== SESSION / AUTH MODELS ====================

class CreateSessionRequest(BaseModel):
    language: str | None = None


class LoginRequest(BaseModel):
    # Empty strings are valid input: the gate reports them as incomplete
    email: str = ""
    password: str = ""


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1)


class AdjustQuantityRequest(BaseModel):
    direction: Direction
