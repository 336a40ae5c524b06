"""에러 응답 모델."""

from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel, Field

from reqdrift.exceptions import DriftEngineError


class ErrorResponse(BaseModel):
    """구조화된 에러 응답 모델. 기능별 실패 결과에도 그대로 사용합니다."""

    error_code: str = Field(description="에러 코드 (예: ERR_VALID_001)")
    message: str = Field(description="에러 메시지")
    details: Optional[Any] = Field(default=None, description="추가 에러 상세 정보")
    feature_key: Optional[str] = Field(default=None, description="실패한 기능 키")
    timestamp: datetime = Field(default_factory=datetime.now, description="에러 발생 시각")

    @classmethod
    def from_exception(
        cls, exc: DriftEngineError, feature_key: Optional[str] = None
    ) -> "ErrorResponse":
        return cls(
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
            feature_key=feature_key,
        )
