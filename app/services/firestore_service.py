# app/services/firestore_service.py
import logging
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

from firebase_admin import firestore

T = TypeVar('T')

DEFAULT_TRANSACTION_ATTEMPTS = 5


def run_in_transaction(db, callback: Callable[..., T], *args, max_attempts: int = DEFAULT_TRANSACTION_ATTEMPTS, **kwargs) -> T:
    """
    callback(transaction, *args, **kwargs)를 하나의 Firestore 트랜잭션으로 실행합니다.

    Firestore는 낙관적 동시성 제어를 사용하므로, 커밋 시점에 읽은 문서가 다른 트랜잭션에 의해
    변경되었다면 callback 전체를 처음부터 다시 실행합니다 (최대 max_attempts회).
    따라서 callback은 transaction.get으로 읽은 최신 값만으로 쓰기를 계산해야 하며,
    모든 읽기는 쓰기보다 먼저 수행되어야 합니다.

    :param db: Firestore 클라이언트
    :param callback: 트랜잭션 본문. 첫 번째 인자로 transaction을 받습니다.
    :param max_attempts: 충돌 시 재시도 횟수
    :return: callback의 반환값
    """
    transaction = db.transaction(max_attempts=max_attempts)
    return firestore.transactional(callback)(transaction, *args, **kwargs)


def get_documents(db, collection_name: str, doc_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """
    여러 문서를 한 번의 배치 조회(get_all)로 가져옵니다.
    존재하지 않는 문서는 결과에서 제외되며, 결과는 {문서 ID: 데이터} 형태입니다.
    """
    ids = list(dict.fromkeys(doc_ids))  # 순서를 유지하며 중복 제거
    if not ids:
        return {}

    collection_ref = db.collection(collection_name)
    refs = [collection_ref.document(doc_id) for doc_id in ids]
    found = {}
    for snapshot in db.get_all(refs):
        if snapshot.exists:
            found[snapshot.id] = snapshot.to_dict()
    logging.debug(f"Firestore 배치 조회 (Collection: {collection_name}, 요청: {len(ids)}, 조회: {len(found)})")
    return found


def snapshot_to_dict(snapshot, id_field: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """스냅샷을 딕셔너리로 변환합니다. id_field가 주어지면 문서 ID를 해당 키로 채웁니다."""
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    if id_field and not data.get(id_field):
        data[id_field] = snapshot.id
    return data
