import logging
import warnings
from contextlib import asynccontextmanager

# Suppress LangChain deprecation chatter
warnings.filterwarnings("ignore", category=UserWarning, module="langchain_core._api.deprecation")

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import LOG_LEVEL, RUN_MIGRATIONS_ON_STARTUP
from dietplan.database import engine, Base, SessionLocal
import dietplan.models  # registers every table on Base.metadata
from dietplan.api import chat, diets, meal_planner, tools
from dietplan.data.diet_rules import seed_diet_rules
from dietplan.exceptions import InvalidArgumentError
from dietplan.schemas.common import DatabaseError, ErrorField, RequestError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def run_migrations():
    """Run pending Alembic migrations, then make sure every table exists."""
    if RUN_MIGRATIONS_ON_STARTUP:
        try:
            from alembic.config import Config
            from alembic import command
            alembic_cfg = Config("alembic.ini")
            command.upgrade(alembic_cfg, "head")
            logger.info("[Alembic] Migrations applied successfully")
        except Exception as e:
            logger.warning(f"[Alembic] Migration failed, falling back to create_all: {e}")

    logger.info("[Startup] Ensuring all tables exist via create_all...")
    Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"[Startup] Database: {engine.url.render_as_string(hide_password=True)}")
    run_migrations()
    db = SessionLocal()
    try:
        seed_diet_rules(db)
    finally:
        db.close()
    yield


app = FastAPI(title="Diet Plan API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.info(f"[API] Rejected {request.method} {request.url.path}: {exc.message}")
    body = RequestError(errors=[ErrorField(field=exc.field, message=exc.message)])
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(body))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"[API] Database error on {request.method} {request.url.path}: {exc}")
    body = DatabaseError(errors=[type(exc).__name__])
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=jsonable_encoder(body))


app.include_router(meal_planner.router)
app.include_router(diets.router)
app.include_router(tools.router)
app.include_router(chat.router)


# Root endpoint
@app.get("/")
def root():
    return {
        "message": "Welcome to the Diet Plan API",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}
