"""
요구사항 드리프트 엔진의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reqdrift import __version__
from reqdrift.config import get_settings
from reqdrift.api.router import api_router
from reqdrift.exceptions import DriftEngineError, InputValidationError, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.
    """
    settings = get_settings()
    logger.info(f"드리프트 엔진이 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")
    logger.info(f"유사도 기준값: {settings.similarity_threshold}")

    yield

    logger.info("드리프트 엔진이 종료됩니다")


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 로그 레벨 설정
    2. CORS 설정
    3. API 라우터 연결
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="요구사항 드리프트 엔진",
        description="요구사항 문서를 정규 상태로 해석하고 관찰된 동작과의 차이를 분류하는 엔진",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(DriftEngineError)
    async def engine_error_handler(request: Request, exc: DriftEngineError):
        status_code = 400 if isinstance(exc, (InputValidationError, ValidationError)) else 500
        return JSONResponse(
            status_code=status_code,
            content={
                "error_code": exc.error_code,
                "message": exc.message,
                "details": exc.details,
                "timestamp": datetime.now().isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "ERR_INTERNAL",
                "message": "내부 서버 오류가 발생했습니다",
                "details": None,
                "timestamp": datetime.now().isoformat(),
            },
        )

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


@app.get("/")
async def root():
    """
    루트 엔드포인트: 서버의 기본 정보를 반환합니다.
    """
    return {
        "name": "요구사항 드리프트 엔진",
        "version": __version__,
        "description": "요구사항 해석 및 드리프트 감지",
        "docs": "/docs",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "reqdrift.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
