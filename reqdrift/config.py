from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    드리프트 엔진의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    # 증거 매칭 설정: 요구사항과 관찰 사실을 연결하는 기준
    similarity_threshold: float = 0.3  # 자카드 유사도가 이 값 이상이어야 매칭으로 인정
    hint_fallback_enabled: bool = True  # 정확한 featureKeyHint가 없을 때 정규화된 힌트로 대체 매칭할지 여부

    # 분류 설정: 매칭된 쌍을 Satisfied/Partial/Different로 판정하는 기준
    clause_coverage_threshold: float = 0.5  # 절(clause) 토큰 중 이 비율 이상이 증거에 있으면 충족
    include_satisfied: bool = True  # 커버리지 보고를 위해 Satisfied 결과를 보고서에 남길지 결정
    security_tags: list[str] = ["security"]  # 보안 관련 요구사항으로 취급할 태그 목록

    # 병렬 처리 설정: 기능(feature)별 해석/분류를 동시에 실행할 최대 개수
    max_concurrency: int = 4

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "REQDRIFT_"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
