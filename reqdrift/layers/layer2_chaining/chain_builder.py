"""Chain builder for Layer 2."""

import logging
from typing import Iterable

from reqdrift.models import DocumentStatus, FeatureChain, RequirementDocument

logger = logging.getLogger(__name__)


class ChainBuilder:
    """
    Layer 2: 정규화된 문서를 기능 키별 체인으로 묶습니다.

    sequenceNumber의 유일성은 Layer 1에서 이미 보장되었다고 가정하며 다시 검사하지 않습니다.
    """

    def build(self, documents: Iterable[RequirementDocument]) -> list[FeatureChain]:
        """
        체인 생성.

        처리 흐름:
        1. Abandoned 문서 제외
        2. sequenceNumber 오름차순 안정 정렬
        3. 정렬 순서를 유지하며 featureKey별로 그룹화

        Returns:
            기능 키 오름차순의 FeatureChain 목록 (기능당 하나)
        """
        active = [doc for doc in documents if doc.status != DocumentStatus.ABANDONED]
        ordered = sorted(active, key=lambda d: d.sequence_number)

        groups: dict[str, list[RequirementDocument]] = {}
        for doc in ordered:
            groups.setdefault(doc.feature_key, []).append(doc)

        chains = [
            FeatureChain(feature_key=key, documents=tuple(groups[key]))
            for key in sorted(groups)
        ]
        logger.info(f"[ChainBuilder] {len(ordered)}개 문서 → {len(chains)}개 체인")
        return chains
