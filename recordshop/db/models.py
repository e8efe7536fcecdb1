# recordshop/db/models.py
from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from recordshop.db.database import Base


class User(Base):
    __tablename__ = "Users"

    user_id = Column("userId", Integer, primary_key=True, index=True)
    username = Column("username", String, unique=True, index=True, nullable=False)
    hashed_password = Column("hashedPassword", String, nullable=False)

    records = relationship("Record", back_populates="seller")
    cart = relationship("Cart", back_populates="user", uselist=False)


class Genre(Base):
    __tablename__ = "Genres"

    genre_id = Column("genreId", Integer, primary_key=True, index=True)
    name = Column("name", String, unique=True, nullable=False)

    records = relationship("Record", back_populates="genre")


# Пластинка, выставленная на продажу
class Record(Base):
    __tablename__ = "Records"

    record_id = Column("recordId", Integer, primary_key=True, index=True)
    image_src = Column("imageSrc", String, nullable=False)
    artist = Column("artist", String, nullable=False)
    album_name = Column("albumName", String, nullable=False)
    genre_id = Column("genreId", Integer, ForeignKey("Genres.genreId"), nullable=False)
    condition = Column("condition", String, nullable=False)
    price = Column("price", Float, nullable=False)
    info = Column("info", Text, nullable=True)
    seller_id = Column("sellerId", Integer, ForeignKey("Users.userId"), nullable=False)

    genre = relationship("Genre", back_populates="records")
    seller = relationship("User", back_populates="records")


class Cart(Base):
    __tablename__ = "Cart"

    cart_id = Column("cartId", Integer, primary_key=True, index=True)
    # one cart per user
    user_id = Column("userId", Integer, ForeignKey("Users.userId"), unique=True, nullable=False)

    user = relationship("User", back_populates="cart")
    items = relationship("CartItem", back_populates="cart")


class CartItem(Base):
    __tablename__ = "CartItems"

    items_id = Column("itemsId", Integer, primary_key=True, index=True)
    cart_id = Column("cartId", Integer, ForeignKey("Cart.cartId"), nullable=False)
    record_id = Column("recordId", Integer, ForeignKey("Records.recordId"), nullable=False)
    quantity = Column("quantity", Integer, default=1, nullable=False)

    cart = relationship("Cart", back_populates="items")
    record = relationship("Record")
