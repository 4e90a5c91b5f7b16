# app/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional, Dict, Any
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from app.core.config import config_by_name

# - API 블루프린트
from app.api.auth.routes import auth_bp
from app.api.users.routes import users_bp
from app.api.follows.routes import follows_bp
from app.api.feed.routes import feed_bp
from app.api.likes.routes import likes_bp
from app.api.comments.routes import comments_bp
from app.api.tts.routes import tts_bp

# - 서비스 모듈
from app.services.speech_synthesis_service import SpeechSynthesisService
from app.api.auth.services import AuthService
from app.api.users.services import UserService
from app.api.follows.services import FollowService
from app.api.feed.services import FeedService
from app.api.likes.services import LikeService
from app.api.comments.services import CommentService


def create_app(config_name: Optional[str] = None, services: Optional[Dict[str, Any]] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 설정 이름 (development / testing / production). 없으면 FLASK_ENV 값을 사용합니다.
    :param services: 미리 만든 서비스 인스턴스 딕셔너리. 주어지면 Firebase를 초기화하지 않고 그대로 사용합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if services is None and not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    if services is not None:
        app.services = dict(services)
    else:
        app.services = _build_services(app)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(follows_bp, url_prefix='/api/users')
    app.register_blueprint(feed_bp, url_prefix='/api/feed')
    app.register_blueprint(likes_bp, url_prefix='/api/works')
    # 댓글은 /api/works/{id}/comments 와 /api/comments/{id} 두 경로를 사용합니다.
    app.register_blueprint(comments_bp, url_prefix='/api')
    app.register_blueprint(tts_bp, url_prefix='/api/tts')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 404, 405 등 라우팅 단계의 오류는 원래 상태 코드를 유지합니다.
        response = {"error_code": err.name.upper().replace(" ", "_"), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app


def _build_services(app: Flask) -> Dict[str, Any]:
    """Firestore를 사용하는 실제 서비스 인스턴스를 의존성 순서대로 생성합니다."""
    services = {}
    attempts = app.config['FIRESTORE_TRANSACTION_ATTEMPTS']

    # 5-1. 의존성이 없거나 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    speech_instance = SpeechSynthesisService()
    speech_instance.init_app(app)
    services['speech'] = speech_instance
    services['auth'] = AuthService()
    services['users'] = UserService()

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    services['follows'] = FollowService(user_service=services['users'], max_attempts=attempts)
    services['feed'] = FeedService(
        follow_service=services['follows'],
        max_authors=app.config['FEED_MAX_AUTHORS']
    )
    services['likes'] = LikeService(max_attempts=attempts)
    services['comments'] = CommentService(max_attempts=attempts)
    logging.info("Social and speech services initialized successfully")
    return services
