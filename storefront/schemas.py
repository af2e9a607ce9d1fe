# storefront/schemas.py
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator


# 👤 User
class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1)


class UserCreate(UserBase):
    password: str = Field(min_length=8)


class UserOut(UserBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# 🛍️ Product
# bounds of the products columns: Numeric(10, 2) and Integer
MAX_PRICE = 99999999.99
MAX_INT = 2**31 - 1


def check_cents(value):
    # Numeric(10, 2) would round silently
    if value is not None and round(value, 2) != value:
        raise ValueError("price may have at most 2 decimal places")
    return value


Price = Annotated[float, Field(ge=0, le=MAX_PRICE, allow_inf_nan=False), AfterValidator(check_cents)]


class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float


class ProductCreate(ProductBase):
    price: Price
    stock: int = Field(default=0, ge=0, le=MAX_INT, strict=True)


class ProductUpdate(BaseModel):
    """Partial update: only the fields sent by the client are applied."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Price] = None
    stock: Optional[int] = Field(default=None, ge=0, le=MAX_INT, strict=True)

    @field_validator("name", "price", "stock")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ProductOut(ProductBase):
    id: int
    stock: int
    model_config = ConfigDict(from_attributes=True)


# 🛒 Cart
# quantity range is checked by the reconciliation rules, only the type is checked here
class CartAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId", ge=1, le=MAX_INT, strict=True)
    quantity: int = Field(strict=True)


class CartQuantityRequest(BaseModel):
    quantity: int = Field(strict=True)


class CartLineOut(BaseModel):
    product_id: int
    quantity: int
    product: Optional[ProductOut] = None


class CartOut(BaseModel):
    id: int
    user_id: int
    items: List[CartLineOut]
    count: int
    total: float


class Message(BaseModel):
    message: str
