# app/core/config.py

import os


def _int_env(key: str, default: int) -> int:
    """정수형 환경 변수를 읽습니다. 값이 없으면 기본값을 사용합니다."""
    value = os.getenv(key)
    return int(value) if value else default


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명용 키. 액세스/리프레시 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    # Aivis Cloud 음성 합성 API 설정. 키가 없으면 실시간 합성 API는 500을 반환합니다.
    AIVIS_API_KEY = os.getenv('AIVIS_API_KEY')
    AIVIS_API_URL = os.getenv('AIVIS_API_URL', 'https://api.aivis-project.com/v1/tts/synthesize')
    AIVIS_DEFAULT_MODEL_UUID = os.getenv('AIVIS_DEFAULT_MODEL_UUID', 'a59cb814-0083-4369-8542-f51a29e72af7')
    TTS_CHUNK_TIMEOUT_SECONDS = _int_env('TTS_CHUNK_TIMEOUT_SECONDS', 30)

    # 팔로우 피드 조립 기본값
    FEED_PER_AUTHOR_LIMIT = _int_env('FEED_PER_AUTHOR_LIMIT', 5)
    FEED_TOTAL_LIMIT = _int_env('FEED_TOTAL_LIMIT', 20)
    FEED_MAX_AUTHORS = _int_env('FEED_MAX_AUTHORS', 10)

    # Firestore 트랜잭션 충돌 시 재시도 횟수
    FIRESTORE_TRANSACTION_ATTEMPTS = _int_env('FIRESTORE_TRANSACTION_ATTEMPTS', 5)


class DevelopmentConfig(Config):
    """개발 환경 설정. 코드 변경 시 자동 재시작 및 상세 에러 페이지를 사용합니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경 설정."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'test-secret-key')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
