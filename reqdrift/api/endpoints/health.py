"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from reqdrift.config import get_settings

router = APIRouter()


@router.get("")
async def health_check():
    """
    기본 상태 확인 함수.
    서버가 켜져 있으면 {"status": "healthy"}를 반환합니다.
    """
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인 함수.
    현재 매칭/분류 설정도 같이 보여줍니다.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "config": {
            "similarity_threshold": settings.similarity_threshold,  # 매칭 인정 기준
            "clause_coverage_threshold": settings.clause_coverage_threshold,
            "hint_fallback_enabled": settings.hint_fallback_enabled,
            "include_satisfied": settings.include_satisfied,
            "max_concurrency": settings.max_concurrency,
        }
    }
