"""Document normalizer for Layer 1.

Layer 1: 문서 정규화 서비스
원시 요구사항 레코드(dict)를 검증하여 RequirementDocument로 구조화합니다.

처리 흐름:
1. 문서별 구조 검증 (status, sequenceNumber, supersedes/removes 규칙)
2. 집합 단위 검증 (sequenceNumber, 문서 ID 중복 → 전체 거부)
3. 순번 순서로 참조 검증 (이미 본 문서의 기준만 참조 가능)
4. 실패한 문서가 속한 기능 키는 통째로 제외하고 나머지 문서 반환
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

import pydantic

from reqdrift.exceptions import ValidationError
from reqdrift.models import (
    CriterionRef,
    DocumentStatus,
    RequirementDocument,
)

logger = logging.getLogger(__name__)

RawDocument = Union[dict, RequirementDocument]

_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass
class NormalizationResult:
    """정규화 결과. 실패는 기능 키 단위로 격리됩니다."""

    documents: list[RequirementDocument] = field(default_factory=list)
    failures: dict[str, ValidationError] = field(default_factory=dict)


def _get(raw: dict, alias: str, name: str) -> Any:
    """camelCase 와이어 이름과 snake_case 필드 이름을 모두 허용합니다."""
    if alias in raw:
        return raw[alias]
    return raw.get(name)


class Normalizer:
    """
    Layer 1: Validation of raw requirement records.

    Valid documents pass through unchanged; no side effects beyond validation.
    """

    def normalize(self, raw_documents: Iterable[RawDocument]) -> NormalizationResult:
        """
        프로젝트 하나의 문서 집합을 검증합니다.

        Args:
            raw_documents: 원시 레코드(dict) 또는 RequirementDocument 목록

        Returns:
            NormalizationResult (통과한 문서 + 기능 키별 실패)

        Raises:
            ValidationError: 집합 전체를 거부해야 하는 경우
                (sequenceNumber 중복, 문서 ID 중복, featureKey 누락)
        """
        raw_documents = list(raw_documents)
        logger.info(f"[Normalizer] 검증할 문서 수: {len(raw_documents)}")

        result = NormalizationResult()
        parsed: list[RequirementDocument] = []
        sequence_owners: dict[int, str] = {}
        document_ids: set[str] = set()

        for raw in raw_documents:
            feature_key = self._read_feature_key(raw)
            document_id = self._read_document_id(raw)

            # 집합 단위 검증: 구조 오류가 있는 문서도 순번/ID 충돌은 검사
            if document_id is not None:
                if document_id in document_ids:
                    raise ValidationError(
                        f"문서 ID 중복: {document_id}",
                        document_id=document_id,
                        field="id",
                    )
                document_ids.add(document_id)

            sequence_number = self._peek_sequence_number(raw)
            if sequence_number is not None:
                if sequence_number in sequence_owners:
                    raise ValidationError(
                        f"sequenceNumber {sequence_number} 중복: "
                        f"{sequence_owners[sequence_number]}, {document_id}",
                        document_id=document_id,
                        field="sequenceNumber",
                        details={"conflicts_with": sequence_owners[sequence_number]},
                    )
                sequence_owners[sequence_number] = document_id

            try:
                parsed.append(self.validate_document(raw))
            except ValidationError as e:
                logger.warning(f"[Normalizer] 문서 검증 실패 ({feature_key}): {e.message}")
                result.failures.setdefault(feature_key, e)

        # 참조 검증은 순번 순서대로: 이미 지나간 문서의 기준만 참조할 수 있음
        seen: set[CriterionRef] = set()
        for doc in sorted(parsed, key=lambda d: d.sequence_number):
            try:
                self._check_references(doc, seen)
            except ValidationError as e:
                logger.warning(f"[Normalizer] 참조 검증 실패 ({doc.feature_key}): {e.message}")
                result.failures.setdefault(doc.feature_key, e)
                continue
            seen.update(doc.ref(c.id) for c in doc.criteria)

        result.documents = [
            doc for doc in parsed if doc.feature_key not in result.failures
        ]

        logger.info(
            f"[Normalizer] 통과 문서: {len(result.documents)}개, "
            f"실패 기능: {len(result.failures)}개"
        )
        return result

    def validate_document(self, raw: RawDocument) -> RequirementDocument:
        """
        문서 하나의 구조를 검증합니다 (다른 문서에 대한 참조 검증은 제외).

        Raises:
            ValidationError: 문서 ID와 문제 필드를 포함
        """
        if isinstance(raw, RequirementDocument):
            self._check_document(raw)
            return raw

        if not isinstance(raw, dict):
            raise ValidationError(
                f"문서 레코드는 dict여야 합니다: {type(raw).__name__}",
                field="document",
            )

        document_id = self._read_document_id(raw)
        if not document_id:
            raise ValidationError("문서 ID가 없습니다", field="id")

        self._check_status(raw, document_id)
        sequence_number = self._read_sequence_number(raw, document_id)
        self._check_raw_criteria(raw, document_id)

        payload = {k: v for k, v in raw.items() if k != "sequence_number"}
        payload["sequenceNumber"] = sequence_number

        try:
            document = RequirementDocument.model_validate(payload)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field_path = ".".join(str(part) for part in first["loc"])
            raise ValidationError(
                f"스키마 검증 실패: {field_path}: {first['msg']}",
                document_id=document_id,
                field=field_path,
            ) from e

        self._check_document(document)
        return document

    # ==================== 필드별 검증 ====================

    def _read_feature_key(self, raw: RawDocument) -> str:
        if isinstance(raw, RequirementDocument):
            return raw.feature_key
        feature_key = _get(raw, "featureKey", "feature_key") if isinstance(raw, dict) else None
        if not isinstance(feature_key, str) or not feature_key.strip():
            # 기능 키를 알 수 없으면 실패를 격리할 범위가 없으므로 전체 거부
            document_id = self._read_document_id(raw)
            raise ValidationError(
                "featureKey가 없어 실패 범위를 정할 수 없습니다",
                document_id=document_id,
                field="featureKey",
            )
        return feature_key

    def _read_document_id(self, raw: RawDocument) -> Optional[str]:
        if isinstance(raw, RequirementDocument):
            return raw.id
        if isinstance(raw, dict):
            value = raw.get("id")
            return str(value) if value is not None else None
        return None

    def _peek_sequence_number(self, raw: RawDocument) -> Optional[int]:
        """중복 검사용. 읽을 수 없는 값은 None (오류는 validate_document에서 보고)."""
        if isinstance(raw, RequirementDocument):
            return raw.sequence_number
        if not isinstance(raw, dict):
            return None
        try:
            return self._read_sequence_number(raw, self._read_document_id(raw))
        except ValidationError:
            return None

    def _read_sequence_number(self, raw: dict, document_id: Optional[str]) -> int:
        value = _get(raw, "sequenceNumber", "sequence_number")
        if value is None:
            raise ValidationError(
                "sequenceNumber가 없습니다",
                document_id=document_id,
                field="sequenceNumber",
            )
        # bool은 int의 하위 타입이지만 순번으로 인정하지 않음
        if isinstance(value, bool):
            number = None
        elif isinstance(value, int):
            number = value
        elif isinstance(value, float):
            number = int(value) if value.is_integer() else None
        elif isinstance(value, str) and _INTEGER.match(value.strip()):
            number = int(value.strip())
        else:
            number = None

        if number is None:
            raise ValidationError(
                f"sequenceNumber는 정수여야 합니다: {value!r}",
                document_id=document_id,
                field="sequenceNumber",
            )
        return number

    def _check_status(self, raw: dict, document_id: str) -> None:
        status = raw.get("status")
        allowed = {s.value for s in DocumentStatus}
        value = status.value if isinstance(status, DocumentStatus) else status
        if value not in allowed:
            raise ValidationError(
                f"허용되지 않는 status: {status!r} (허용: {sorted(allowed)})",
                document_id=document_id,
                field="status",
            )

    def _check_raw_criteria(self, raw: dict, document_id: str) -> None:
        criteria = raw.get("criteria") or []
        if not isinstance(criteria, (list, tuple)):
            raise ValidationError(
                "criteria는 목록이어야 합니다",
                document_id=document_id,
                field="criteria",
            )
        for idx, criterion in enumerate(criteria):
            if not isinstance(criterion, dict):
                continue
            if criterion.get("supersedes") is not None and criterion.get("removes") is not None:
                raise ValidationError(
                    f"기준 {criterion.get('id')}에 supersedes와 removes가 동시에 설정됨",
                    document_id=document_id,
                    field=f"criteria.{idx}.supersedes",
                )

    def _check_document(self, doc: RequirementDocument) -> None:
        """모델로 변환된 문서의 의미 규칙을 검사합니다."""
        criterion_ids: set[str] = set()
        for idx, criterion in enumerate(doc.criteria):
            if criterion.id in criterion_ids:
                raise ValidationError(
                    f"기준 ID 중복: {criterion.id}",
                    document_id=doc.id,
                    field=f"criteria.{idx}.id",
                )
            criterion_ids.add(criterion.id)

            if criterion.supersedes is not None and criterion.removes is not None:
                raise ValidationError(
                    f"기준 {criterion.id}에 supersedes와 removes가 동시에 설정됨",
                    document_id=doc.id,
                    field=f"criteria.{idx}.supersedes",
                )

            # 본문 없는 기준은 순수 삭제(removes)일 때만 허용
            if not criterion.text.strip() and criterion.removes is None:
                raise ValidationError(
                    f"기준 {criterion.id}의 text가 비어 있습니다",
                    document_id=doc.id,
                    field=f"criteria.{idx}.text",
                )

    def _check_references(
        self, doc: RequirementDocument, seen: set[CriterionRef]
    ) -> None:
        for idx, criterion in enumerate(doc.criteria):
            for field_name in ("supersedes", "removes"):
                ref = getattr(criterion, field_name)
                if ref is not None and ref not in seen:
                    raise ValidationError(
                        f"기준 {criterion.id}의 {field_name} 참조 {ref}가 "
                        f"이전 문서에 존재하지 않습니다",
                        document_id=doc.id,
                        field=f"criteria.{idx}.{field_name}",
                        details={"ref": str(ref)},
                    )
