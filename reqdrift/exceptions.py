"""
드리프트 엔진 커스텀 예외 계층입니다.
각 레이어별 구조화된 에러 코드와 메시지를 제공합니다.

에러 범위:
- ValidationError, DanglingReferenceError: 해당 기능(feature) 체인에만 치명적
- EvidenceMatchingDegraded: 경고용, 실행을 중단하지 않음
"""

from typing import Optional, Any


class DriftEngineError(Exception):
    """드리프트 엔진 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(DriftEngineError):
    """Layer 1: 요구사항 문서 검증 에러 (문서 ID + 필드)."""

    def __init__(
        self,
        message: str,
        document_id: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.document_id = document_id
        self.field = field
        merged = {"document_id": document_id, "field": field}
        if details:
            merged.update(details)
        super().__init__(message, error_code="ERR_VALID_001", details=merged)


class DanglingReferenceError(DriftEngineError):
    """Layer 3: 폴딩 시점에 활성 상태가 아닌 기준을 참조하는 에러."""

    def __init__(
        self,
        message: str,
        feature_key: str,
        document_id: str,
        ref: Optional[str] = None,
    ):
        self.feature_key = feature_key
        self.document_id = document_id
        self.ref = ref
        super().__init__(
            message,
            error_code="ERR_RESOLVE_001",
            details={
                "feature_key": feature_key,
                "document_id": document_id,
                "ref": ref,
            },
        )


class EvidenceMatchingDegraded(DriftEngineError):
    """Layer 4: 정확한 힌트 매칭 대신 대체 매칭을 사용했다는 경고."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="WARN_MATCH_001", details=details)


class InputValidationError(DriftEngineError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
