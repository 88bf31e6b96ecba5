from datetime import datetime, timedelta, timezone

import pytest
from redis.asyncio.client import Pipeline
from redis.exceptions import WatchError

from models.interview import Interview, InterviewStatus
from services.question_service import fallback_questions
from utils.errors import ConcurrentUpdateError, NotFoundError
from utils.ids import new_object_id

from conftest import completed_interview


def pending_interview(candidate_id, created_at=None):
    return Interview(
        candidate_id=candidate_id,
        questions=fallback_questions(),
        created_at=created_at or datetime.now(timezone.utc),
    )


async def test_insert_and_get(repository):
    interview = pending_interview(new_object_id())
    await repository.insert(interview)

    loaded = await repository.get(interview.id)
    assert loaded == interview
    assert await repository.get(new_object_id()) is None


async def test_stored_document_carries_the_total(repository, redis):
    interview = completed_interview(new_object_id(), "A", "a@x.io", [3, 3, 3, 3, 3, 3])
    await repository.insert(interview)

    raw = await redis.get(f"interview:{interview.id}")
    assert '"totalScore":18' in raw


async def test_candidate_history_is_newest_first(repository):
    candidate_id = new_object_id()
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    older = pending_interview(candidate_id, base)
    newer = completed_interview(candidate_id, "A", "a@x.io", [1] * 6, created_at=base + timedelta(days=1))
    await repository.insert(older)
    await repository.insert(newer)
    await repository.insert(pending_interview(new_object_id()))

    history = await repository.list_for_candidate(candidate_id)
    assert [i.id for i in history] == [newer.id, older.id]
    assert (await repository.latest_for_candidate(candidate_id)).id == newer.id
    assert (await repository.latest_for_candidate(candidate_id, InterviewStatus.PENDING)).id == older.id


async def test_list_completed_only_returns_completed(repository):
    done = completed_interview(new_object_id(), "A", "a@x.io", [5] * 6)
    await repository.insert(done)
    await repository.insert(pending_interview(new_object_id()))

    assert [i.id for i in await repository.list_completed()] == [done.id]


async def test_update_marks_completion_in_the_index(repository):
    interview = pending_interview(new_object_id())
    await repository.insert(interview)

    def finish(doc):
        doc.status = InterviewStatus.COMPLETED
        doc.current_question_index = 6

    updated = await repository.update(interview.id, finish)
    assert updated.updated_at >= interview.updated_at
    assert [i.id for i in await repository.list_completed()] == [interview.id]


async def test_update_missing_document(repository):
    with pytest.raises(NotFoundError):
        await repository.update(new_object_id(), lambda doc: None)


async def test_aborted_mutation_writes_nothing(repository):
    interview = pending_interview(new_object_id())
    await repository.insert(interview)

    def explode(doc):
        doc.candidate_name = "changed"
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        await repository.update(interview.id, explode)
    assert (await repository.get(interview.id)).candidate_name == ""


async def test_watch_conflict_is_reported(repository, monkeypatch):
    interview = pending_interview(new_object_id())
    await repository.insert(interview)

    async def conflicting_execute(self, raise_on_error=True):
        raise WatchError("Watched variable changed.")

    monkeypatch.setattr(Pipeline, "execute", conflicting_execute)
    with pytest.raises(ConcurrentUpdateError):
        await repository.update(interview.id, lambda doc: None)
