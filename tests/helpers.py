"""테스트용 원시 입력 빌더."""

from reqdrift.models import ObservedFact


def make_criterion(cid, text, supersedes=None, removes=None, tags=None) -> dict:
    """원시 인수 기준 dict를 만드는 헬퍼. 참조는 (documentId, criterionId) 튜플로 받습니다."""
    criterion = {"id": cid, "text": text}
    if supersedes:
        criterion["supersedes"] = {"documentId": supersedes[0], "criterionId": supersedes[1]}
    if removes:
        criterion["removes"] = {"documentId": removes[0], "criterionId": removes[1]}
    if tags:
        criterion["tags"] = list(tags)
    return criterion


def make_document(doc_id, seq, feature, criteria, status="Done") -> dict:
    """원시 요구사항 문서 dict를 만드는 헬퍼."""
    return {
        "id": doc_id,
        "sequenceNumber": seq,
        "status": status,
        "featureKey": feature,
        "criteria": list(criteria),
    }


def make_fact(hint, description, location="", security=False) -> ObservedFact:
    return ObservedFact(
        feature_key_hint=hint,
        description=description,
        evidence_location=location,
        security_relevant=security,
    )

