# app/main.py
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging
from app.routers import quest_routes, user_quests, user_routes
from app.database import engine, Base

# Register every mapped table before create_all
from app.models import quests, user, user_quest  # noqa: F401

load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# CORS with credentials (for cookie sessions)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=settings.ALLOW_METHODS,
    allow_headers=settings.ALLOW_HEADERS,
)

register_exception_handlers(app)

@app.get("/")
def read_root():
    return {"message": "Quest tracker backend running"}

# Routers
app.include_router(user_routes.router)
app.include_router(quest_routes.router)
app.include_router(user_quests.router)

# Create DB tables
Base.metadata.create_all(bind=engine)
logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)

# OpenAPI: bearer auth on every route
from fastapi.openapi.utils import get_openapi

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Paste your access_token into the Authorize button to test secured routes.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    for path in openapi_schema["paths"].values():
        for method in path.values():
            method["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
