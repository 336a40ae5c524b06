"""
심각도 조회표입니다.

(종류, 출처 문서 상태) → 심각도:
┌───────────┬──────────────────────────┬──────────┬────────┐
│ 종류      │ Done                     │ Approved │ Draft  │
├───────────┼──────────────────────────┼──────────┼────────┤
│ Missing   │ Critical                 │ High     │ Medium │
│ Different │ High (보안 기준: Critical) │ High     │ Medium │
│ Partial   │ Medium                   │ Medium   │ Low    │
│ Extra     │ Low (보안 증거: High)      │ Low      │ Low    │
└───────────┴──────────────────────────┴──────────┴────────┘

Satisfied는 심각도가 없습니다 (None).
"""

from typing import Optional

from reqdrift.models import DocumentStatus, GapCategory, Severity

_Done = DocumentStatus.DONE
_Approved = DocumentStatus.APPROVED
_Draft = DocumentStatus.DRAFT

SEVERITY_TABLE: dict[tuple[GapCategory, DocumentStatus], Severity] = {
    (GapCategory.MISSING, _Done): Severity.CRITICAL,
    (GapCategory.MISSING, _Approved): Severity.HIGH,
    (GapCategory.MISSING, _Draft): Severity.MEDIUM,
    (GapCategory.DIFFERENT, _Done): Severity.HIGH,
    (GapCategory.DIFFERENT, _Approved): Severity.HIGH,
    (GapCategory.DIFFERENT, _Draft): Severity.MEDIUM,
    (GapCategory.PARTIAL, _Done): Severity.MEDIUM,
    (GapCategory.PARTIAL, _Approved): Severity.MEDIUM,
    (GapCategory.PARTIAL, _Draft): Severity.LOW,
    (GapCategory.EXTRA, _Done): Severity.LOW,
    (GapCategory.EXTRA, _Approved): Severity.LOW,
    (GapCategory.EXTRA, _Draft): Severity.LOW,
}

# 보안 관련일 때만 격상되는 칸
SECURITY_ESCALATION: dict[tuple[GapCategory, DocumentStatus], Severity] = {
    (GapCategory.DIFFERENT, _Done): Severity.CRITICAL,
    (GapCategory.EXTRA, _Done): Severity.HIGH,
}


def severity_for(
    category: GapCategory,
    status: DocumentStatus,
    security_relevant: bool = False,
) -> Optional[Severity]:
    """
    심각도 조회.

    Raises:
        ValueError: Abandoned 출처처럼 조회표에 없는 조합
    """
    if category == GapCategory.SATISFIED:
        return None
    key = (category, status)
    if security_relevant and key in SECURITY_ESCALATION:
        return SECURITY_ESCALATION[key]
    if key not in SEVERITY_TABLE:
        raise ValueError(f"심각도를 정할 수 없는 조합: {category.value}/{status.value}")
    return SEVERITY_TABLE[key]
