# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tortoise.exceptions import BaseORMException

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import CodeMateError, PersistenceError, ValidationError

from app.api.v1.routers import auth, profile, requests, user, chat, payment
from app.api.v1.routers.ws_chat import router as ws_chat_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

HTTP_ERROR_MESSAGES = {
    "AUTH_REQUIRED": "Authentication required",
    "AUTH_INVALID_TOKEN": "Invalid or expired token",
    "AUTH_USER_NOT_FOUND": "User not found",
}

def _error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
        headers=headers,
    )

@app.exception_handler(CodeMateError)
async def codemate_error_handler(request: Request, exc: CodeMateError):
    return _error_response(exc.status_code, exc.code, exc.message)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Routers raise HTTPException(detail="AUTH_...") with a machine-readable code
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    if detail.replace("_", "").isalpha() and detail.isupper():
        code, message = detail, HTTP_ERROR_MESSAGES.get(detail, detail)
    else:
        code, message = f"HTTP_{exc.status_code}", detail
    return _error_response(exc.status_code, code, message, getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid request")
    return _error_response(ValidationError.status_code, ValidationError.code, message)

@app.exception_handler(BaseORMException)
async def persistence_error_handler(request: Request, exc: BaseORMException):
    # Storage details stay in the log, never in the response
    logger.exception("[db] %s %s failed", request.method, request.url.path, exc_info=exc)
    err = PersistenceError("Something went wrong, please try again")
    return _error_response(err.status_code, err.code, err.message)

@app.on_event("startup")
async def on_startup():
    await init_db()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(profile.router, prefix="/api/v1")
app.include_router(requests.router, prefix="/api/v1")
app.include_router(user.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")
app.include_router(payment.router, prefix="/api/v1")

# WebSocket
app.include_router(ws_chat_router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
