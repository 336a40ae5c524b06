"""공유 pytest fixture 모음."""

import pytest

from helpers import make_criterion, make_document, make_fact
from reqdrift.layers.layer1_normalization import Normalizer
from reqdrift.layers.layer2_chaining import ChainBuilder
from reqdrift.layers.layer3_resolution import Resolver
from reqdrift.layers.layer4_matching import EvidenceMatcher
from reqdrift.layers.layer5_classification import GapClassifier, KeywordCoverageJudge
from reqdrift.layers.layer6_report import ReportGenerator
from reqdrift.services import DriftEngine


@pytest.fixture
def engine():
    """설정에 의존하지 않도록 모든 기준값을 명시한 DriftEngine."""
    return DriftEngine(
        normalizer=Normalizer(),
        chain_builder=ChainBuilder(),
        resolver=Resolver(security_tags=["security"]),
        matcher=EvidenceMatcher(threshold=0.3, hint_fallback_enabled=True),
        classifier=GapClassifier(
            judge=KeywordCoverageJudge(clause_coverage_threshold=0.5),
            include_satisfied=True,
            threshold=0.3,
        ),
        report_generator=ReportGenerator(),
    )


@pytest.fixture
def scenario_a_documents():
    """이메일 로그인이 휴대폰 로그인으로 교체된 auth 기능."""
    return [
        make_document("doc-1", 1, "auth", [make_criterion("A1", "login with email")]),
        make_document(
            "doc-2", 2, "auth",
            [make_criterion("A2", "login with phone", removes=("doc-1", "A1"))],
        ),
    ]


@pytest.fixture
def scenario_a_evidence():
    return [make_fact("auth", "login form accepts email", "src/auth/login.py:10")]


@pytest.fixture
def scenario_b_documents():
    return [
        make_document("doc-1", 1, "dashboard", [make_criterion("B1", "show stats cards")]),
    ]


@pytest.fixture
def scenario_b_evidence():
    return [
        make_fact(
            "dashboard",
            "dashboard renders stats cards with live counts",
            "src/dashboard/cards.tsx:42",
        )
    ]
