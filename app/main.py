from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import get_settings
from app.core.errors import FileServiceError
from app.core.identity import get_current_user_id
from app.core.logging import configure_logging
from app.core.templating import BASE_DIR
from app.models.database import Base, engine
from app.models import file, user  # noqa: F401  register tables on Base
from app.routers import api, auth, download, files

configure_logging(get_settings())
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("app_started")
    yield
    engine.dispose()


app = FastAPI(title="Filedrop", version="1.0.0", lifespan=lifespan)

app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")

# include our routers
app.include_router(auth.router)
app.include_router(files.router)
app.include_router(api.router)
app.include_router(download.router)


@app.exception_handler(FileServiceError)
async def file_service_error_handler(request: Request, exc: FileServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def home(request: Request):
    user_id = get_current_user_id(request)
    if user_id:
        return RedirectResponse(url="/files", status_code=303)
    return RedirectResponse(url="/login", status_code=303)
