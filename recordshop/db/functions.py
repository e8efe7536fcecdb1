# recordshop/db/functions.py
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from recordshop.db.models import User, Genre, Record, Cart, CartItem
from recordshop.db.schemas import (
    CartItemSchema,
    CartRecord,
    CartRow,
    RecordSchema,
    RecordWithGenre,
)

logger = logging.getLogger(__name__)

# Integer columns are int32 on postgres
MAX_ID = 2 ** 31 - 1


# ---------- users ----------

async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.username == username))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, username: str, hashed_password: str) -> User:
    db_user = User(username=username, hashed_password=hashed_password)
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        # unique constraint on Users.username
        await db.rollback()
        raise HTTPException(status_code=409, detail="username already taken")
    await db.refresh(db_user)
    logger.debug("Created user %s with userId %s", username, db_user.user_id)
    return db_user


# ---------- genres ----------

async def get_all_genres(db: AsyncSession) -> List[Genre]:
    result = await db.execute(select(Genre).order_by(Genre.genre_id))
    return result.scalars().all()


async def get_genre_by_id(db: AsyncSession, genre_id: int) -> Genre:
    if genre_id > MAX_ID:
        raise HTTPException(status_code=404, detail=f"Cannot find genre with genreId: {genre_id}")
    result = await db.execute(select(Genre).filter(Genre.genre_id == genre_id))
    genre = result.scalar_one_or_none()
    if not genre:
        raise HTTPException(status_code=404, detail=f"Cannot find genre with genreId: {genre_id}")
    return genre


# ---------- records ----------

async def get_all_records(db: AsyncSession) -> List[Record]:
    result = await db.execute(select(Record).order_by(Record.record_id))
    return result.scalars().all()


async def get_record_with_genre(db: AsyncSession, record_id: int) -> RecordWithGenre:
    """Record row with the genre name joined in as ``genre``."""
    if record_id > MAX_ID:
        raise HTTPException(status_code=404, detail=f"Cannot find record with recordId: {record_id}")
    result = await db.execute(
        select(Record, Genre.name)
        .join(Genre, Record.genre_id == Genre.genre_id)
        .filter(Record.record_id == record_id)
    )
    row = result.first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Cannot find record with recordId: {record_id}")
    record, genre_name = row
    return RecordWithGenre(**RecordSchema.model_validate(record).model_dump(), genre=genre_name)


async def create_record(
    db: AsyncSession,
    seller_id: int,
    image_src: str,
    artist: str,
    album_name: str,
    genre_id: int,
    condition: str,
    price: float,
    info: Optional[str],
) -> Record:
    if price < 0:
        raise HTTPException(status_code=400, detail="price must be non-negative")
    if genre_id > MAX_ID:
        raise HTTPException(status_code=400, detail=f"Unknown genreId: {genre_id}")
    genre = await db.execute(select(Genre.genre_id).filter(Genre.genre_id == genre_id))
    if genre.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail=f"Unknown genreId: {genre_id}")

    new_record = Record(
        image_src=image_src,
        artist=artist,
        album_name=album_name,
        genre_id=genre_id,
        condition=condition,
        price=price,
        info=info,
        seller_id=seller_id,
    )
    db.add(new_record)
    await db.commit()
    await db.refresh(new_record)
    logger.debug("Created record %s for seller %s", new_record.record_id, seller_id)
    return new_record


# ---------- cart ----------

async def get_cart_by_user_id(db: AsyncSession, user_id: int) -> Optional[Cart]:
    result = await db.execute(select(Cart).filter(Cart.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_cart(db: AsyncSession, user_id: int) -> Cart:
    cart = await get_cart_by_user_id(db, user_id)
    if cart:
        return cart

    cart = Cart(user_id=user_id)
    db.add(cart)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent first add created it; Cart.userId is unique
        await db.rollback()
        cart = await get_cart_by_user_id(db, user_id)
        if cart is None:
            raise
        return cart
    await db.refresh(cart)
    logger.debug("Created cart %s for user %s", cart.cart_id, user_id)
    return cart


async def add_record_to_cart(db: AsyncSession, user_id: int, record_id: int) -> CartRecord:
    """Insert a new line item. Adding the same record twice gives two rows."""
    record = await get_record_with_genre(db, record_id)

    cart = await get_or_create_cart(db, user_id)
    new_item = CartItem(cart_id=cart.cart_id, record_id=record_id, quantity=1)
    db.add(new_item)
    await db.commit()
    await db.refresh(new_item)
    logger.debug("Added record %s to cart %s as item %s", record_id, cart.cart_id, new_item.items_id)

    return CartRecord(**record.model_dump(), items_id=new_item.items_id)


async def get_cart_rows(db: AsyncSession, user_id: int) -> List[CartRow]:
    result = await db.execute(
        select(Cart, CartItem, Record)
        .join(CartItem, CartItem.cart_id == Cart.cart_id)
        .join(Record, Record.record_id == CartItem.record_id)
        .filter(Cart.user_id == user_id)
        .order_by(CartItem.items_id)
    )
    rows = []
    for cart, item, record in result.all():
        rows.append(CartRow(
            **RecordSchema.model_validate(record).model_dump(),
            cart_id=cart.cart_id,
            user_id=cart.user_id,
            items_id=item.items_id,
            quantity=item.quantity,
        ))
    return rows


async def remove_cart_item(db: AsyncSession, user_id: int, items_id: int) -> Optional[CartItemSchema]:
    """Delete one line item from the user's own cart.

    Returns the deleted row, or None when the user's cart holds no such item.
    """
    if items_id > MAX_ID:
        return None
    result = await db.execute(
        select(CartItem)
        .join(Cart, Cart.cart_id == CartItem.cart_id)
        .filter(CartItem.items_id == items_id, Cart.user_id == user_id)
    )
    cart_item = result.scalar_one_or_none()
    if not cart_item:
        return None

    removed = CartItemSchema.model_validate(cart_item)
    await db.delete(cart_item)
    await db.commit()
    logger.debug("Removed item %s from cart %s", items_id, removed.cart_id)
    return removed
