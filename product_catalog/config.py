import os
from dotenv import load_dotenv

load_dotenv()

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))

POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_DB = os.getenv("POSTGRES_DB", "postgres")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)
DB_AUTO_CREATE = os.getenv("DB_AUTO_CREATE", "true").lower() == "true"

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)
REDIS_DB = int(os.getenv("REDIS_DB", "0"))

# "redis" or "memory"
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "redis").lower()
CATALOG_CACHE_TTL = int(os.getenv("CATALOG_CACHE_TTL", "3600"))  # 1 hour

CONTENTFUL_BASE_URL = os.getenv("CONTENTFUL_BASE_URL", "https://cdn.contentful.com")
CONTENTFUL_SPACE_ID = os.getenv("CONTENTFUL_SPACE_ID")
CONTENTFUL_ENVIRONMENT = os.getenv("CONTENTFUL_ENVIRONMENT", "master")
CONTENTFUL_ACCESS_TOKEN = os.getenv("CONTENTFUL_ACCESS_TOKEN")
CONTENTFUL_CONTENT_TYPE = os.getenv("CONTENTFUL_CONTENT_TYPE", "product")
CONTENTFUL_PAGE_LIMIT = int(os.getenv("CONTENTFUL_PAGE_LIMIT", "100"))
CONTENTFUL_TIMEOUT = float(os.getenv("CONTENTFUL_TIMEOUT", "30"))

# Soft-deleted products matched by a sync keep their deleted_at unless enabled
SYNC_RESTORE_DELETED = os.getenv("SYNC_RESTORE_DELETED", "false").lower() == "true"

LOG_DIR = os.getenv("LOG_DIR", "logs")
