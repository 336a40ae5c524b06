"""
감사(Audit) API입니다.
요구사항 문서를 정규 상태로 해석하고, 관찰 사실과 비교한 갭 분석 결과를 반환합니다.
"""

import logging
from typing import Any, List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from reqdrift.services import get_engine, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class ResolveRequest(BaseModel):
    """해석 요청 (원시 요구사항 문서 목록)"""
    documents: List[dict[str, Any]]


class AuditRequest(BaseModel):
    """갭 분석 요청 (원시 요구사항 문서 + 관찰 사실)"""
    documents: List[dict[str, Any]]
    evidence: List[dict[str, Any]] = Field(default_factory=list)


@router.post("/resolve")
async def resolve_documents(request: ResolveRequest) -> dict:
    """
    문서 집합을 기능별 정규 상태로 해석합니다.

    - 기능별로 성공(states) 또는 실패(failures)가 반환됩니다.
    - sequenceNumber 중복 같은 집합 단위 오류는 400으로 거부됩니다.
    """
    result = get_engine().build_canonical_state(request.documents)
    logger.info(
        f"[API] 해석 완료: 성공 {len(result.states)}개, 실패 {len(result.failures)}개"
    )
    return result.model_dump(mode="json")


@router.post("/gaps")
async def detect_gaps(request: AuditRequest) -> dict:
    """
    문서를 해석한 뒤 관찰 사실과 비교한 갭 분석 결과 목록을 반환합니다.
    정렬과 요약이 필요하면 /run을 사용합니다.
    """
    engine = get_engine()
    resolution = engine.build_canonical_state(request.documents)
    detection = engine.analyze(
        resolution.states, request.evidence, resolution.failed_feature_keys
    )
    return {
        "findings": [f.model_dump(mode="json") for f in detection.findings],
        "warnings": [w.model_dump(mode="json") for w in detection.warnings],
        "failures": {
            key: error.model_dump(mode="json")
            for key, error in resolution.failures.items()
        },
    }


@router.post("/run")
async def run_audit(request: AuditRequest) -> dict:
    """
    전체 감사 파이프라인을 실행하고 정렬된 보고서를 반환합니다.

    보고서 구성:
    - summary: 심각도별/종류별 건수
    - features: 기능별로 묶인 결과 (출처 이력 포함)
    - findings: 심각도 → 기능 키 순으로 정렬된 전체 결과
    - warnings, failures: 비치명적 경고와 기능별 실패
    """
    report = await get_orchestrator().run(request.documents, request.evidence)
    return report.model_dump(mode="json")
