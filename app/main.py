import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import orders, products
from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db.database import engine, init_db

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """시작 시 로깅 설정과 테이블 생성, 종료 시 커넥션 풀 정리"""
    configure_logging(settings)
    init_db()
    logger.info("BeautyCare Store API started (env=%s)", settings.app_env)
    yield
    engine.dispose()


app = FastAPI(
    title="BeautyCare Store API",
    description="화장품 쇼핑몰 상품 카탈로그 및 주문/재고 관리 API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(products.router, tags=["products"])
app.include_router(orders.router, tags=["orders"])


def error_response(status_code: int, message: str) -> JSONResponse:
    """{success: false, message} 형태의 에러 응답"""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 검증 실패는 400으로 응답하고, 문제가 된 필드를 메시지에 포함합니다."""
    fields = []
    for error in exc.errors():
        loc = [
            str(part)
            for part in error.get("loc", ())
            if part not in ("body", "query", "path")
        ]
        field = ".".join(loc) or "body"
        if field not in fields:
            fields.append(field)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Invalid request: {', '.join(fields)}",
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
    )


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "BeautyCare Store API is running",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트 (Docker 헬스체크용)"""
    return {"status": "healthy"}
