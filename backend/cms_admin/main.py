"""
CMS Admin application entry point
Menu management API for the web and docs sites
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cms_admin.config import settings
from cms_admin.database import SessionLocal, init_db
from cms_admin.routers import menus

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    init_db()

    if settings.SEED_DEFAULT_MENUS:
        from cms_admin.services.menu_seed import seed_menu_data
        from cms_admin.services.menu_service import MenuService
        from cms_admin.services.menu_store import SqlAlchemyNodeStore

        seed_db = SessionLocal()
        try:
            stats = seed_menu_data(MenuService(
                SqlAlchemyNodeStore(seed_db),
                locales=settings.LOCALES,
                primary_locale=settings.PRIMARY_LOCALE,
            ))
            if any(stats.values()):
                logger.info(f"Seeded default menus: {stats}")
        finally:
            seed_db.close()

    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Navigation menu management for the CMS admin panel",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(menus.router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "description": "Navigation menu management",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
