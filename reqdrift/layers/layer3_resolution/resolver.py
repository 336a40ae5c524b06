"""Main resolver service for Layer 3.

Layer 3: 해석(Resolution) 서비스
기능 체인을 왼쪽에서 오른쪽으로 폴딩하여 충돌 없는 정규 상태를 계산합니다.

처리 흐름:
1. 체인의 문서를 순번 순서대로 순회
2. 각 인수 기준을 Additive / Override / Remove 연산으로 변환
3. 작업 상태(FoldState)에 연산 적용 (출처 로그 기록)
4. 남은 활성 기준으로 CanonicalFeatureState 생성

모호한 입력은 추측하지 않고 DanglingReferenceError로 실패시킵니다.
실패는 해당 체인에만 적용되며 다른 기능의 해석은 계속됩니다.
"""

import logging
from typing import Iterable, Optional

from reqdrift.config import get_settings
from reqdrift.exceptions import DanglingReferenceError
from reqdrift.models import (
    AcceptanceCriterion,
    CanonicalFeatureState,
    ErrorResponse,
    FeatureChain,
    ResolutionResult,
)
from .operations import FoldState, operation_for

logger = logging.getLogger(__name__)


class Resolver:
    """
    Layer 3: Deterministic left fold of a feature chain into canonical state.
    """

    def __init__(self, security_tags: Optional[Iterable[str]] = None):
        if security_tags is None:
            security_tags = get_settings().security_tags
        self.security_tags = frozenset(tag.lower() for tag in security_tags)

    def resolve(self, chain: FeatureChain) -> CanonicalFeatureState:
        """
        체인 하나를 정규 상태로 폴딩합니다.

        Args:
            chain: Abandoned 문서가 제외된, 비어 있지 않은 체인

        Returns:
            CanonicalFeatureState (같은 입력에 대해 항상 같은 결과)

        Raises:
            DanglingReferenceError: 활성 상태가 아닌 기준을 대체/삭제하려는 경우
        """
        if not chain.documents:
            raise ValueError(f"빈 체인은 해석할 수 없습니다: {chain.feature_key}")

        state = FoldState(feature_key=chain.feature_key)
        for document in chain.documents:
            for criterion in document.criteria:
                operation = operation_for(
                    document, criterion, self._is_security_relevant(criterion)
                )
                operation.apply(state)

        canonical = state.freeze(chain)
        if canonical.unratified:
            logger.info(f"[Resolver] {chain.feature_key}: 승인/완료 문서가 없는 체인 (unratified)")
        logger.debug(
            f"[Resolver] {chain.feature_key}: 활성 기준 {len(canonical.criteria)}개, "
            f"비활성 {len(canonical.retired)}개"
        )
        return canonical

    def resolve_all(self, chains: Iterable[FeatureChain]) -> ResolutionResult:
        """
        모든 체인을 해석합니다. 한 체인의 실패는 다른 체인에 영향을 주지 않습니다.
        """
        result = ResolutionResult()
        for chain in chains:
            try:
                result.states[chain.feature_key] = self.resolve(chain)
            except DanglingReferenceError as e:
                logger.warning(f"[Resolver] {chain.feature_key} 해석 실패: {e.message}")
                result.failures[chain.feature_key] = ErrorResponse.from_exception(
                    e, feature_key=chain.feature_key
                )
        return result

    def _is_security_relevant(self, criterion: AcceptanceCriterion) -> bool:
        return any(tag.lower() in self.security_tags for tag in criterion.tags)
