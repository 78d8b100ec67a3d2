import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import ENV, FRONTEND_URL, configure_logging
from app.database import engine, Base
from app.errors import QuillError

# Register every table before create_all
from app.models.user import User  # noqa: F401
from app.models.category import Category  # noqa: F401
from app.models.post import Post  # noqa: F401
from app.models.like import PostLike  # noqa: F401
from app.models.bookmark import Bookmark  # noqa: F401
from app.models.comment import Comment  # noqa: F401

from app.api.users import router as users_router
from app.api.posts import router as posts_router
from app.api.categories import router as categories_router
from app.api.comments import router as comments_router
from app.api.upload import router as upload_router

logger = configure_logging()

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Quill API",
    docs_url=None if ENV == "prod" else "/docs",
    redoc_url=None if ENV == "prod" else "/redoc"
)

origins = [FRONTEND_URL] if FRONTEND_URL else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router)
app.include_router(posts_router)
app.include_router(categories_router)
app.include_router(comments_router)
app.include_router(upload_router)


@app.get("/")
def home():
    return PlainTextResponse("Quill API is running...")


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Every failure leaves the API as {"message": ...}

@app.exception_handler(QuillError)
async def quill_error_handler(request: Request, exc: QuillError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request data"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    content = {"message": "Server Error"}
    if ENV != "prod":
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)
