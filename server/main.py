# server/main.py

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import auth, products
from config import Settings, get_settings
from core.credentials import build_password_context
from core.errors import ApiError
from core.tokens import TokenService
from database import create_db_engine, create_session_factory, init_db


logger = logging.getLogger(__name__)

NOT_FOUND_PAGE = "<h1>404 Page Not Found</h1><p>Sorry, this page could not be found!</p>"

ENDPOINTS = [
    ("POST", "/api/signup", "open"),
    ("POST", "/api/login", "open"),
    ("GET", "/api/protected", "token required"),
    ("POST", "/api/products", "token required"),
    ("GET", "/api/products", "open"),
    ("GET", "/api/products/{id}", "open"),
    ("PATCH", "/api/products/{id}", "token required"),
    ("DELETE", "/api/products/{id}", "token required"),
]


# -------------------------------
# Exception Handlers
# -------------------------------

async def handle_api_error(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError):
    # Malformed path or query parameters
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request: " + ", ".join(problems)})


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    # Unknown path or method falls through to the HTML page
    if exc.status_code in (404, 405):
        return HTMLResponse(NOT_FOUND_PAGE, status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


async def handle_unexpected(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error": str(exc)},
    )


# -------------------------------
# Application Factory
# -------------------------------

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    logger.info(f"Connected to database {engine.url.render_as_string(hide_password=True)}")

    app = FastAPI(title="Storefront API")

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.pwd_context = build_password_context(settings.BCRYPT_ROUNDS)
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(auth.router)
    app.include_router(products.router)

    return app


def run():
    settings = get_settings()
    app = create_app(settings)

    logger.info(f"Server is running on http://{settings.HOST}:{settings.PORT}")
    for method, path, access in ENDPOINTS:
        logger.info(f"{method:<7}{path} ({access})")

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
