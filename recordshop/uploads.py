# recordshop/uploads.py
import logging
import shutil
import time
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

UPLOAD_FIELD = "image"
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def make_filename(original_name: str) -> str:
    extension = Path(original_name or "").suffix.lower()
    return f"{UPLOAD_FIELD}-{int(time.time() * 1000)}{extension}"


async def save_upload(file: Optional[UploadFile], images_dir: Path) -> str:
    """Write the uploaded image under images_dir and return its public path."""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="image is required")

    extension = Path(file.filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"unsupported image type: {extension or 'none'}",
        )

    images_dir.mkdir(parents=True, exist_ok=True)
    filename = make_filename(file.filename)
    target = images_dir / filename
    stem = target.stem
    counter = 0
    # two uploads in the same millisecond
    while target.exists():
        counter += 1
        filename = f"{stem}-{counter}{extension}"
        target = images_dir / filename

    await run_in_threadpool(_copy_to_disk, file, target)
    logger.debug("Stored upload %s", filename)
    return f"/images/{filename}"


def _copy_to_disk(file: UploadFile, target: Path) -> None:
    file.file.seek(0)
    with target.open("wb") as out:
        shutil.copyfileobj(file.file, out)


def discard_upload(image_src: str, images_dir: Path) -> None:
    """Remove a stored upload whose listing was never created."""
    target = images_dir / Path(image_src).name
    if target.is_file():
        target.unlink()
        logger.debug("Discarded upload %s", target.name)
