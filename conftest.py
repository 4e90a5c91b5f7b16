# conftest.py
"""
테스트 공용 픽스처.

Firestore 대신 메모리에서 동작하는 FakeFirestore를 사용합니다.
문서 조회/쓰기, where/order_by/limit 쿼리, get_all 배치 조회와
낙관적 트랜잭션(커밋 시 읽은 문서의 버전 검사 후 충돌이면 재시도)을 흉내냅니다.
"""
import copy
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import firebase_admin.firestore
from google.api_core.exceptions import Aborted, NotFound
from flask_jwt_extended import create_access_token

from app import create_app
from app.api.auth.services import AuthService
from app.api.comments.services import CommentService
from app.api.feed.services import FeedService
from app.api.follows.services import FollowService
from app.api.likes.services import LikeService
from app.api.users.services import UserService
from app.services.speech_synthesis_service import SpeechSynthesisService

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class _TransactionConflict(Exception):
    """커밋 시점에 읽었던 문서가 다른 커밋에 의해 변경됨"""


# =====================================================================================
# FakeFirestore
# =====================================================================================
class FakeSnapshot:
    def __init__(self, reference: 'FakeDocumentReference', data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, client: 'FakeFirestore', collection_name: str, doc_id: str):
        self._client = client
        self.collection_name = collection_name
        self.id = doc_id

    @property
    def path(self) -> Tuple[str, str]:
        return (self.collection_name, self.id)

    def get(self, transaction: Optional['FakeTransaction'] = None) -> FakeSnapshot:
        with self._client.lock:
            data, version = self._client.read(self.path)
        if transaction is not None:
            transaction.record_read(self.path, version)
        return FakeSnapshot(self, data)

    def set(self, data: Dict[str, Any], merge: bool = False):
        with self._client.lock:
            self._client.write_set(self.path, data, merge)

    def update(self, data: Dict[str, Any]):
        with self._client.lock:
            self._client.write_update(self.path, data)

    def delete(self):
        with self._client.lock:
            self._client.write_delete(self.path)


class FakeQuery:
    def __init__(self, client: 'FakeFirestore', collection_name: str, filters=None, order=None, limit_count=None):
        self._client = client
        self._collection_name = collection_name
        self._filters = filters or []
        self._order = order
        self._limit = limit_count

    def where(self, field_path=None, op_string=None, value=None, *, filter=None) -> 'FakeQuery':
        if filter is not None:
            condition = (filter.field_path, filter.op_string, filter.value)
        else:
            condition = (field_path, op_string, value)
        return FakeQuery(self._client, self._collection_name, self._filters + [condition], self._order, self._limit)

    def order_by(self, field_path: str, direction: str = 'ASCENDING') -> 'FakeQuery':
        return FakeQuery(self._client, self._collection_name, self._filters, (field_path, direction), self._limit)

    def limit(self, count: int) -> 'FakeQuery':
        return FakeQuery(self._client, self._collection_name, self._filters, self._order, count)

    def stream(self):
        with self._client.lock:
            self._client.query_count += 1
            self._client.check_query_failure(self._filters)
            rows = [
                (doc_id, copy.deepcopy(data))
                for (collection_name, doc_id), data in self._client.documents.items()
                if collection_name == self._collection_name
            ]
        rows = [(doc_id, data) for doc_id, data in rows if all(self._matches(data, f) for f in self._filters)]
        if self._order:
            field_path, direction = self._order
            rows.sort(key=lambda row: row[1].get(field_path), reverse=(direction == 'DESCENDING'))
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            yield FakeSnapshot(FakeDocumentReference(self._client, self._collection_name, doc_id), data)

    @staticmethod
    def _matches(data: Dict[str, Any], condition) -> bool:
        field_path, op_string, value = condition
        field_value = data.get(field_path)
        if op_string == '==':
            return field_value == value
        if op_string == 'array_contains':
            return value in (field_value or [])
        if op_string == 'in':
            return field_value in value
        raise NotImplementedError(op_string)


class FakeCollection(FakeQuery):
    def __init__(self, client: 'FakeFirestore', name: str):
        super().__init__(client, name)
        self.name = name

    def document(self, doc_id: str) -> FakeDocumentReference:
        return FakeDocumentReference(self._client, self.name, doc_id)


class FakeTransaction:
    def __init__(self, client: 'FakeFirestore', max_attempts: int):
        self._client = client
        self.max_attempts = max_attempts
        self._read_versions: Dict[Tuple[str, str], int] = {}
        self._writes: List[Tuple[str, Tuple[str, str], Any]] = []

    def begin(self):
        self._read_versions = {}
        self._writes = []

    def record_read(self, path, version: int):
        self._read_versions.setdefault(path, version)

    def set(self, reference: FakeDocumentReference, data: Dict[str, Any], merge: bool = False):
        self._writes.append(('merge' if merge else 'set', reference.path, copy.deepcopy(data)))

    def update(self, reference: FakeDocumentReference, data: Dict[str, Any]):
        self._writes.append(('update', reference.path, copy.deepcopy(data)))

    def delete(self, reference: FakeDocumentReference):
        self._writes.append(('delete', reference.path, None))

    def commit(self):
        hook = self._client.before_commit
        if hook is not None:
            hook(self)
        with self._client.lock:
            for path, version in self._read_versions.items():
                if self._client.versions.get(path, 0) != version:
                    self._client.conflicts += 1
                    raise _TransactionConflict(path)
            for action, path, data in self._writes:
                if action == 'update':
                    self._client.write_update(path, data)
                elif action == 'delete':
                    self._client.write_delete(path)
                else:
                    self._client.write_set(path, data, merge=(action == 'merge'))
            self._client.commits += 1


def fake_transactional(callback: Callable) -> Callable:
    """firestore.transactional의 대체. 충돌하면 callback을 처음부터 다시 실행합니다."""
    def run(transaction: FakeTransaction, *args, **kwargs):
        for _ in range(transaction.max_attempts):
            transaction.begin()
            result = callback(transaction, *args, **kwargs)
            try:
                transaction.commit()
            except _TransactionConflict:
                continue
            return result
        raise Aborted(f"Failed to commit transaction in {transaction.max_attempts} attempts.")
    return run


class FakeFirestore:
    def __init__(self):
        self.lock = threading.RLock()
        self.documents: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.versions: Dict[Tuple[str, str], int] = {}
        self.before_commit: Optional[Callable[[FakeTransaction], None]] = None
        self.failing_query_values = set()
        self.commits = 0
        self.conflicts = 0
        self.query_count = 0

    # --- Firestore 클라이언트 인터페이스 ---
    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def transaction(self, max_attempts: int = 5) -> FakeTransaction:
        return FakeTransaction(self, max_attempts)

    def get_all(self, references):
        for reference in references:
            yield reference.get()

    # --- 내부 저장소 ---
    def read(self, path):
        return copy.deepcopy(self.documents.get(path)), self.versions.get(path, 0)

    def _bump(self, path):
        self.versions[path] = self.versions.get(path, 0) + 1

    def write_set(self, path, data, merge=False):
        if merge and path in self.documents:
            self.documents[path].update(copy.deepcopy(data))
        else:
            self.documents[path] = copy.deepcopy(data)
        self._bump(path)

    def write_update(self, path, data):
        if path not in self.documents:
            raise NotFound(f"No document to update: {path}")
        self.documents[path].update(copy.deepcopy(data))
        self._bump(path)

    def write_delete(self, path):
        self.documents.pop(path, None)
        self._bump(path)

    def check_query_failure(self, filters):
        for _, _, value in filters:
            if value in self.failing_query_values:
                raise RuntimeError(f"query failed for {value}")

    # --- 테스트 도우미 ---
    def seed(self, collection_name: str, doc_id: str, data: Dict[str, Any]):
        self.collection(collection_name).document(doc_id).set(data)

    def data(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.read((collection_name, doc_id))[0]


# =====================================================================================
# 픽스처
# =====================================================================================
@pytest.fixture
def fake_db(monkeypatch):
    monkeypatch.setattr(firebase_admin.firestore, 'transactional', fake_transactional)
    return FakeFirestore()


@pytest.fixture
def seed_user(fake_db):
    def _seed(uid: str, username: Optional[str] = None, display_name: Optional[str] = None, photo_url=None):
        fake_db.seed('users', uid, {
            'uid': uid,
            'username': username or uid,
            'display_name': display_name or (username or uid).title(),
            'photo_url': photo_url,
            'bio': None
        })
    return _seed


@pytest.fixture
def seed_work(fake_db):
    def _seed(work_id: str, uid: str, minutes: int = 0, content_rating: str = 'all',
              like_count: int = 0, comment_count: int = 0):
        fake_db.seed('works', work_id, {
            'work_id': work_id,
            'uid': uid,
            'title': f"title {work_id}",
            'like_count': like_count,
            'comment_count': comment_count,
            'content_rating': content_rating,
            'created_at': BASE_TIME + timedelta(minutes=minutes)
        })
    return _seed


@pytest.fixture
def services(fake_db):
    user_service = UserService(db=fake_db)
    follow_service = FollowService(user_service=user_service, db=fake_db)
    speech_service = SpeechSynthesisService()
    speech_service.configure(api_key='test-api-key', api_url='https://tts.example.com/synthesize', timeout=30)
    auth_service = MagicMock(spec=AuthService)
    return {
        'users': user_service,
        'follows': follow_service,
        'feed': FeedService(follow_service=follow_service, db=fake_db),
        'likes': LikeService(db=fake_db),
        'comments': CommentService(db=fake_db),
        'speech': speech_service,
        'auth': auth_service,
    }


@pytest.fixture
def app(services):
    return create_app('testing', services=services)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(uid: str) -> Dict[str, str]:
        with app.app_context():
            token = create_access_token(identity=uid)
        return {'Authorization': f"Bearer {token}"}
    return _headers
