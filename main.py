from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from app.api.v1.endpoints import (
    auth,
    export_pdf,
    generate,
    health,
    pages,
    profile,
    regenerate_section,
    resumes,
    scrape_job,
    templates,
    upload,
)
from app.core.config import settings
from app.db.database import close_supabase
from app.middleware.session import SessionMiddleware
from contextlib import asynccontextmanager
import logging

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_supabase()

app = FastAPI(title="Resume Builder API", version="0.1.0", lifespan=lifespan)
app.add_middleware(SessionMiddleware)

app.include_router(scrape_job.router, prefix="/api", tags=["jobs"])
app.include_router(export_pdf.router, prefix="/api", tags=["export"])
app.include_router(regenerate_section.router, prefix="/api", tags=["ai"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(upload.router, prefix="/api", tags=["import"])
app.include_router(generate.router, prefix="/api", tags=["ai"])
app.include_router(templates.router, prefix="/api/templates", tags=["templates"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(health.router, prefix="/api")
app.include_router(health.router, include_in_schema=False)
app.include_router(pages.router, tags=["pages"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
