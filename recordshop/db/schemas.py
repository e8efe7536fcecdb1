# recordshop/db/schemas.py
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# JSON uses the camelCase column names of the tables
class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


# Учетные данные
class Credentials(BaseModel):
    username: str
    password: str


class SignInBody(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserSchema(CamelModel):
    user_id: int
    username: str


class SignInResponse(BaseModel):
    token: str
    user: UserSchema


class Principal(CamelModel):
    """Identity decoded from a bearer token."""
    user_id: Optional[int] = None
    username: Optional[str] = None


class GenreSchema(CamelModel):
    genre_id: int
    name: str


class GenreName(CamelModel):
    name: str


# Схема для пластинки (Record)
class RecordSchema(CamelModel):
    record_id: int
    image_src: str
    artist: str
    album_name: str
    genre_id: int
    condition: str
    price: float
    info: Optional[str] = None
    seller_id: int


class RecordWithGenre(RecordSchema):
    genre: str


class CartRecord(RecordWithGenre):
    items_id: int


class AddToCartBody(CamelModel):
    record_id: int


class CartItemSchema(CamelModel):
    items_id: int
    cart_id: int
    record_id: int
    quantity: int


# Строка корзины: Cart + CartItems + Records
class CartRow(CamelModel):
    cart_id: int
    user_id: int
    items_id: int
    record_id: int
    quantity: int
    image_src: str
    artist: str
    album_name: str
    genre_id: int
    condition: str
    price: float
    info: Optional[str] = None
    seller_id: int
