# recordshop/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncSession

from recordshop.auth_utils import create_access_token, get_current_user, hash_password, verify_password
from recordshop.config import settings
from recordshop.db.database import database, get_db
from recordshop.db.functions import *
from recordshop.db.init_db import init_db
from recordshop.db.schemas import (
    AddToCartBody,
    CartItemSchema,
    CartRecord,
    CartRow,
    Credentials,
    GenreName,
    GenreSchema,
    Principal,
    RecordSchema,
    RecordWithGenre,
    SignInBody,
    SignInResponse,
    UserSchema,
)
from recordshop.uploads import discard_upload, save_upload

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Инициализация базы данных
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging(settings.log_level)
    database.connect(settings.database_url, echo=settings.sql_echo, ssl=settings.database_ssl)
    if not await database.ping():
        logger.warning("Database did not answer the startup ping")
    await init_db(database, seed_genres=settings.seed_genres)
    logger.info("recordshop started")
    yield
    await database.disconnect()
    logger.info("recordshop stopped")


app = FastAPI(title="Record Marketplace API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Загруженные обложки: public/images
settings.images_dir.mkdir(parents=True, exist_ok=True)
app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "an unexpected error occurred"},
    )


def parse_positive_id(value: str, name: str) -> int:
    if not (value.isascii() and value.isdigit()) or int(value) <= 0:
        raise HTTPException(status_code=400, detail=f"{name} must be a positive integer")
    return int(value)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "database": await database.ping()}


# ---------- auth ----------

@app.post("/api/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def register(body: Credentials, db: AsyncSession = Depends(get_db)):
    if not body.username.strip() or not body.password:
        raise HTTPException(status_code=400, detail="username and password are required")
    hashed_password = await run_in_threadpool(hash_password, body.password)
    return await create_user(db, body.username, hashed_password)


@app.post("/api/sign-in", response_model=SignInResponse)
async def sign_in(body: SignInBody, db: AsyncSession = Depends(get_db)):
    if not body.username or not body.password:
        raise HTTPException(status_code=401, detail="invalid login")

    user = await get_user_by_username(db, body.username)
    if not user or not await run_in_threadpool(verify_password, body.password, user.hashed_password):
        logger.debug("Failed sign-in for %s", body.username)
        raise HTTPException(status_code=401, detail="invalid login")

    payload = {"userId": user.user_id, "username": user.username}
    return SignInResponse(token=create_access_token(payload), user=UserSchema.model_validate(user))


# ---------- listings ----------

@app.post("/api/create-listing", response_model=RecordSchema, status_code=status.HTTP_201_CREATED)
async def create_listing(
    principal: Principal = Depends(get_current_user),
    artist: str = Form(...),
    album: str = Form(...),
    genre: int = Form(...),
    condition: str = Form(...),
    price: float = Form(...),
    info: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    if principal.user_id is None:
        raise HTTPException(status_code=401, detail="User ID not available in request")

    image_src = await save_upload(image, settings.images_dir)
    try:
        return await create_record(
            db,
            seller_id=principal.user_id,
            image_src=image_src,
            artist=artist,
            album_name=album,
            genre_id=genre,
            condition=condition,
            price=price,
            info=info,
        )
    except Exception:
        discard_upload(image_src, settings.images_dir)
        raise


@app.get("/api/get-genres", response_model=List[GenreSchema])
async def get_genres(db: AsyncSession = Depends(get_db)):
    return await get_all_genres(db)


@app.get("/api/all-products", response_model=List[RecordSchema])
async def all_products(db: AsyncSession = Depends(get_db)):
    return await get_all_records(db)


@app.get("/api/products/{record_id}", response_model=RecordWithGenre)
async def get_product(record_id: str, db: AsyncSession = Depends(get_db)):
    return await get_record_with_genre(db, parse_positive_id(record_id, "recordId"))


@app.get("/api/genre/{genre_id}", response_model=GenreName)
async def get_genre(genre_id: str, db: AsyncSession = Depends(get_db)):
    return await get_genre_by_id(db, parse_positive_id(genre_id, "genreId"))


# ---------- cart ----------

@app.post("/api/cart/add", response_model=CartRecord, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    body: AddToCartBody,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if principal.user_id is None:
        logger.error("User ID not available in request")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return await add_record_to_cart(db, principal.user_id, body.record_id)


@app.get("/api/cart", response_model=List[CartRow])
async def get_cart(principal: Principal = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    if principal.user_id is None:
        raise HTTPException(status_code=401, detail="User ID not available in request")
    return await get_cart_rows(db, principal.user_id)


@app.delete("/api/cart/remove/{items_id}", response_model=Optional[CartItemSchema])
async def remove_from_cart(
    items_id: str,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    item_id = parse_positive_id(items_id, "itemsId")
    if principal.user_id is None:
        raise HTTPException(status_code=401, detail="User ID not available in request")
    return await remove_cart_item(db, principal.user_id, item_id)


# ---------- client ----------

@app.get("/{full_path:path}", include_in_schema=False)
async def serve_client(full_path: str):
    """Serve the built client; unknown paths get index.html for client-side routing."""
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")

    dist_dir = settings.client_dist_dir.resolve()
    if full_path:
        candidate = (dist_dir / full_path).resolve()
        if candidate.is_file() and dist_dir in candidate.parents:
            return FileResponse(candidate)

    index_file = dist_dir / "index.html"
    if not index_file.is_file():
        raise HTTPException(status_code=404, detail="client build not found")
    return FileResponse(index_file)


def run():
    import uvicorn
    uvicorn.run("recordshop.main:app", host="0.0.0.0", port=settings.port)


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    run()
