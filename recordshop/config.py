# recordshop/config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent

RDS_VARS = ("RDS_USERNAME", "RDS_PASSWORD", "RDS_HOSTNAME", "RDS_PORT", "RDS_DB_NAME")


def _as_bool(value: str, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    database_url: str
    token_secret: str
    database_ssl: bool = False
    port: int = 8080
    log_level: str = "INFO"
    sql_echo: bool = False
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    public_dir: Path = PACKAGE_DIR / "public"
    client_dist_dir: Path = Path("client") / "dist"
    seed_genres: bool = True

    @property
    def images_dir(self) -> Path:
        return self.public_dir / "images"


def build_database_url() -> str:
    """DATABASE_URL wins; otherwise the URL is assembled from the RDS_* parts."""
    url = os.getenv("DATABASE_URL")
    if not url:
        parts = {name: os.getenv(name) for name in RDS_VARS}
        missing = [name for name, value in parts.items() if not value]
        if missing:
            raise RuntimeError(
                "DATABASE_URL not set and RDS connection parts missing: " + ", ".join(missing)
            )
        url = (
            f"postgresql://{parts['RDS_USERNAME']}:{parts['RDS_PASSWORD']}"
            f"@{parts['RDS_HOSTNAME']}:{parts['RDS_PORT']}/{parts['RDS_DB_NAME']}"
        )

    # asyncpg is the driver for postgres urls
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def load_settings() -> Settings:
    load_dotenv()

    token_secret = os.getenv("TOKEN_SECRET")
    if not token_secret:
        raise RuntimeError("TOKEN_SECRET not found in .env")

    origins = os.getenv("ALLOWED_ORIGINS", "*")

    return Settings(
        database_url=build_database_url(),
        token_secret=token_secret,
        database_ssl=_as_bool(os.getenv("DATABASE_SSL")),
        port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        sql_echo=_as_bool(os.getenv("SQL_ECHO")),
        allowed_origins=[origin.strip() for origin in origins.split(",") if origin.strip()] or ["*"],
        public_dir=Path(os.getenv("PUBLIC_DIR", str(PACKAGE_DIR / "public"))),
        client_dist_dir=Path(os.getenv("CLIENT_DIST_DIR", str(Path("client") / "dist"))),
        seed_genres=_as_bool(os.getenv("SEED_GENRES"), default=True),
    )


settings = load_settings()
