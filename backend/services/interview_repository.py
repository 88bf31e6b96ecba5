# services/interview_repository.py
"""
Interview documents stored as JSON in Redis.

Keys:
  interview:{id}                    -> JSON document (no expiry)
  candidate:{candidate_id}:interviews -> sorted set of ids scored by creation time
  interviews:completed              -> set of completed interview ids
"""
from typing import Callable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import WatchError

from models.interview import Interview, InterviewStatus, utcnow
from utils.errors import ConcurrentUpdateError, NotFoundError
from utils.logger import get_logger

logger = get_logger("InterviewRepository")

COMPLETED_KEY = "interviews:completed"


def interview_key(interview_id: str) -> str:
    return f"interview:{interview_id}"


def candidate_key(candidate_id: str) -> str:
    return f"candidate:{candidate_id}:interviews"


class InterviewRepository:
    def __init__(self, redis: Redis):
        self.redis = redis

    def _queue_write(self, pipe, interview: Interview) -> None:
        pipe.set(interview_key(interview.id), interview.model_dump_json(by_alias=True))
        pipe.zadd(candidate_key(interview.candidate_id), {interview.id: interview.created_at.timestamp()})
        if interview.status == InterviewStatus.COMPLETED:
            pipe.sadd(COMPLETED_KEY, interview.id)

    async def _load_many(self, ids: List[str]) -> List[Interview]:
        if not ids:
            return []
        raws = await self.redis.mget([interview_key(i) for i in ids])
        return [Interview.model_validate_json(raw) for raw in raws if raw]

    async def insert(self, interview: Interview) -> Interview:
        async with self.redis.pipeline(transaction=True) as pipe:
            self._queue_write(pipe, interview)
            await pipe.execute()
        logger.info(f"Interview {interview.id} created for candidate {interview.candidate_id}")
        return interview

    async def get(self, interview_id: str) -> Optional[Interview]:
        raw = await self.redis.get(interview_key(interview_id))
        return Interview.model_validate_json(raw) if raw else None

    async def list_for_candidate(self, candidate_id: str) -> List[Interview]:
        """Newest first."""
        ids = await self.redis.zrevrange(candidate_key(candidate_id), 0, -1)
        return await self._load_many(ids)

    async def latest_for_candidate(
        self, candidate_id: str, status: Optional[InterviewStatus] = None
    ) -> Optional[Interview]:
        for interview in await self.list_for_candidate(candidate_id):
            if status is None or interview.status == status:
                return interview
        return None

    async def list_completed(self) -> List[Interview]:
        ids = sorted(await self.redis.smembers(COMPLETED_KEY))
        return await self._load_many(ids)

    async def update(self, interview_id: str, mutate: Callable[[Interview], None]) -> Interview:
        """
        Read-modify-write of one document under WATCH. `mutate` edits the
        freshly loaded interview in place and may raise to abort the write.
        """
        key = interview_key(interview_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                raw = await pipe.get(key)
                if not raw:
                    raise NotFoundError("Interview not found")
                interview = Interview.model_validate_json(raw)
                mutate(interview)
                interview.updated_at = utcnow()
                pipe.multi()
                self._queue_write(pipe, interview)
                await pipe.execute()
            except WatchError as exc:
                logger.warning(f"Concurrent update detected on interview {interview_id}")
                raise ConcurrentUpdateError("Interview was modified concurrently, please retry") from exc
        return interview
