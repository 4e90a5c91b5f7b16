# app/api/feed/services.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.models.work import Work, FeedResult, AgeFilter, R18_RATING
from app.api.follows.services import FollowService
from app.utils.datetime_utils import DateTimeUtils

DEFAULT_MAX_AUTHORS = 10
MAX_FETCH_WORKERS = 8


def apply_age_filter(works: List[Work], age_filter: AgeFilter) -> List[Work]:
    """연령 제한 설정에 따라 작품을 걸러냅니다. 조회 쿼리가 아니라 결과에 적용하는 후처리 필터입니다."""
    if age_filter == AgeFilter.R18_ONLY:
        return [work for work in works if work.content_rating == R18_RATING]
    if age_filter == AgeFilter.R18_ALLOWED:
        return list(works)
    return [work for work in works if work.content_rating != R18_RATING]


class FeedService:
    """
    팔로우 피드를 조립하는 서비스 클래스 (Pull 모델).

    요청할 때마다 팔로우 중인 사용자들의 최신 작품을 작성자별로 조회해 합친 뒤,
    created_at 내림차순으로 정렬하고 total_limit개로 자릅니다.
    작성자별 조회 개수를 제한해 한 사용자가 피드를 독점하지 않도록 합니다.
    """
    def __init__(self, follow_service: FollowService, db=None, max_authors: int = DEFAULT_MAX_AUTHORS):
        self.db = db or firestore.client()
        self.works_ref = self.db.collection('works')
        self.follow_service = follow_service
        self.max_authors = max_authors

    def assemble_feed(self, viewer_id: str, per_author_limit: int = 5, total_limit: int = 20,
                      age_filter: AgeFilter = AgeFilter.ALL) -> FeedResult:
        """
        viewer_id의 팔로우 피드를 만듭니다.

        :param viewer_id: 피드를 보는 사용자 ID
        :param per_author_limit: 작성자 한 명당 가져올 최대 작품 수
        :param total_limit: 피드 전체의 최대 작품 수
        :param age_filter: 연령 제한 필터 (정렬/자르기 후에 적용)
        :return: FeedResult. 팔로우한 사용자가 없으면 has_feeds=False
        """
        following_ids = self.follow_service.get_following_ids(viewer_id)
        if not following_ids:
            return FeedResult(works=[], has_feeds=False)

        author_ids = following_ids[:self.max_authors]
        if len(following_ids) > len(author_ids):
            logging.info(f"피드 조회 대상 제한: {len(following_ids)}명 중 {len(author_ids)}명 (viewer: {viewer_id})")
        if not author_ids:
            return FeedResult(works=[], has_feeds=True)

        all_works: List[Work] = []
        # 작성자별 조회는 서로 독립적이므로 동시에 실행하고, 모두 끝난 뒤 병합합니다.
        with ThreadPoolExecutor(max_workers=min(len(author_ids), MAX_FETCH_WORKERS)) as executor:
            futures = [executor.submit(self._fetch_author_works, author_id, per_author_limit) for author_id in author_ids]
            for author_id, future in zip(author_ids, futures):
                try:
                    all_works.extend(future.result())
                except Exception as e:
                    # 한 작성자의 조회 실패는 피드 전체를 실패시키지 않습니다.
                    logging.error(f"팔로우 사용자 {author_id}의 작품 조회 실패: {e}", exc_info=True)

        all_works.sort(key=lambda work: DateTimeUtils.sort_key(work.created_at), reverse=True)
        feed_works = all_works[:total_limit]
        return FeedResult(works=apply_age_filter(feed_works, age_filter), has_feeds=True)

    def _fetch_author_works(self, author_id: str, limit: int) -> List[Work]:
        query = (
            self.works_ref
            .where(filter=FieldFilter('uid', '==', author_id))
            .order_by('created_at', direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [Work.from_dict(doc.id, doc.to_dict() or {}) for doc in query.stream()]
