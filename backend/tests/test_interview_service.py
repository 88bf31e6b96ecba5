import pytest

from config import AIConfig
from models.interview import Interview, InterviewStatus
from services.candidate_service import CandidateReviewService
from services.interview_service import InterviewService
from services.question_service import QuestionProvider, fallback_questions
from services.resume_parser import DOCX_MIME
from services.scoring_service import AnswerScorer, ScoreResult
from utils.auth import CurrentUser
from utils.errors import (
    AIUnavailableError,
    AuthorizationError,
    InterviewStateError,
    NotFoundError,
    ReattemptNotAllowedError,
)
from utils.ids import new_object_id

from conftest import FakeLLMClient, completed_interview, make_docx, score_responses

RESUME = make_docx("Grace Hopper", "grace@navy.mil", "+1 555 010 0199", "Compilers, COBOL")


async def upload(service, user, blob=RESUME):
    return await service.upload_resume(user, "resume.docx", DOCX_MIME, blob)


async def test_upload_creates_pending_interview(service, candidate):
    result = await upload(service, candidate)
    interview = result.interview

    assert interview.status == InterviewStatus.PENDING
    assert interview.candidate_name == "Grace Hopper"
    assert interview.candidate_email == "grace@navy.mil"
    assert interview.candidate_phone == "+1 555 010 0199"
    assert len(interview.questions) == 6
    assert interview.current_question_index == 0
    assert "Compilers" in interview.resume_text


async def test_blank_fields_fall_back_to_token_identity(service, candidate):
    result = await upload(service, candidate, make_docx("experienced developer"))

    assert result.candidate_info.missing_fields() == {"name": True, "email": True, "phone": True}
    assert result.interview.candidate_name == "Token Name"
    assert result.interview.candidate_email == "token@example.com"
    assert result.interview.candidate_phone == ""


async def test_full_lifecycle(repository, ai_config, candidate):
    scorer = AnswerScorer(ai_config, FakeLLMClient(score_responses([8, 7, 9, 6, 5, 4])))
    service = InterviewService(repository, QuestionProvider(ai_config, None), scorer)
    interview = (await upload(service, candidate)).interview

    started = await service.start(candidate, interview.id)
    assert started.status == InterviewStatus.IN_PROGRESS
    assert started.started_at is not None

    for step in range(6):
        before = await repository.get(interview.id)
        assert before.current_question_index == step
        result = await service.submit_answer(candidate, interview.id, f"answer {step}", 12.4)
        assert result.interview.current_question_index == step + 1
        assert result.interview.total_score == sum(q.score for q in result.interview.questions)
        assert result.is_complete is (step == 5)

    final = await repository.get(interview.id)
    assert final.status == InterviewStatus.COMPLETED
    assert final.total_score == 39
    assert [q.score for q in final.questions] == [8, 7, 9, 6, 5, 4]
    assert [q.time_spent for q in final.questions] == [12] * 6
    assert final.questions[3].answer == "answer 3"
    assert final.started_at <= final.completed_at
    assert final.ai_summary.startswith("Overall Performance: Good (39/60).")
    assert result.next_question is None


async def test_start_is_idempotent_while_running(service, candidate):
    interview = (await upload(service, candidate)).interview
    first = await service.start(candidate, interview.id)
    await service.submit_answer(candidate, interview.id, "a", 5)

    again = await service.start(candidate, interview.id)
    assert again.current_question_index == 1
    assert again.started_at == first.started_at


async def test_completed_interview_cannot_restart_or_take_answers(service, repository, candidate):
    done = completed_interview(candidate.id, "A", "a@x.io", [5] * 6)
    await repository.insert(done)

    with pytest.raises(InterviewStateError):
        await service.start(candidate, done.id)
    with pytest.raises(InterviewStateError):
        await service.submit_answer(candidate, done.id, "late", 1)


async def test_answers_require_a_started_interview(service, candidate):
    interview = (await upload(service, candidate)).interview
    with pytest.raises(InterviewStateError):
        await service.submit_answer(candidate, interview.id, "too early", 1)


async def test_stale_question_index_is_rejected(service, repository, candidate):
    interview = (await upload(service, candidate)).interview
    await service.start(candidate, interview.id)
    await service.submit_answer(candidate, interview.id, "first", 3, question_index=0)

    with pytest.raises(InterviewStateError) as err:
        await service.submit_answer(candidate, interview.id, "duplicate", 3, question_index=0)
    assert err.value.payload == {"currentQuestionIndex": 1}
    assert (await repository.get(interview.id)).questions[1].answer == ""


class RacingScorer:
    """Lets another submission land while this one is being scored."""

    def __init__(self, repository, interview_id):
        self.repository = repository
        self.interview_id = interview_id

    async def score(self, question, answer, difficulty, resume_text=None):
        def other_submission(doc):
            doc.questions[doc.current_question_index].answer = "winner"
            doc.questions[doc.current_question_index].score = 9
            doc.current_question_index += 1

        await self.repository.update(self.interview_id, other_submission)
        return ScoreResult(score=1)


async def test_racing_submission_does_not_overwrite(service, repository, candidate):
    interview = (await upload(service, candidate)).interview
    await service.start(candidate, interview.id)
    service.scorer = RacingScorer(repository, interview.id)

    with pytest.raises(InterviewStateError):
        await service.submit_answer(candidate, interview.id, "loser", 4)

    stored = await repository.get(interview.id)
    assert stored.current_question_index == 1
    assert stored.questions[0].answer == "winner"
    assert stored.questions[0].score == 9


async def test_strict_scoring_failure_leaves_document_untouched(repository, candidate):
    strict = AIConfig(require_ai=True)
    questions = FakeLLMClient(['["q1", "q2", "q3", "q4", "q5", "q6"]'])
    service = InterviewService(
        repository,
        QuestionProvider(strict, questions),
        AnswerScorer(strict, FakeLLMClient(error=RuntimeError("provider down"))),
    )
    interview = (await upload(service, candidate)).interview
    await service.start(candidate, interview.id)

    with pytest.raises(AIUnavailableError):
        await service.submit_answer(candidate, interview.id, "answer", 10)

    stored = await repository.get(interview.id)
    assert stored.current_question_index == 0
    assert stored.questions[0].answer == ""
    assert stored.status == InterviewStatus.IN_PROGRESS


async def test_strict_question_failure_creates_nothing(repository, candidate):
    strict = AIConfig(require_ai=True)
    service = InterviewService(
        repository,
        QuestionProvider(strict, FakeLLMClient(["sorry"])),
        AnswerScorer(strict, None),
    )
    with pytest.raises(AIUnavailableError):
        await upload(service, candidate)
    assert await repository.list_for_candidate(candidate.id) == []


async def test_other_candidates_are_refused(service, candidate):
    interview = (await upload(service, candidate)).interview
    stranger = CurrentUser(id=new_object_id())

    with pytest.raises(AuthorizationError):
        await service.get_for_candidate(stranger, interview.id)
    with pytest.raises(AuthorizationError):
        await service.start(stranger, interview.id)
    with pytest.raises(NotFoundError):
        await service.get_for_candidate(candidate, new_object_id())


async def test_update_candidate_details(service, candidate):
    interview = (await upload(service, candidate, make_docx("no details here"))).interview
    updated = await service.update_candidate(candidate, interview.id, " Jane Roe ", "jane@roe.io", "555-111-2222")

    assert (updated.candidate_name, updated.candidate_email, updated.candidate_phone) == (
        "Jane Roe", "jane@roe.io", "555-111-2222",
    )


async def test_completed_interview_blocks_new_upload(service, repository, candidate):
    done = completed_interview(candidate.id, "A", "a@x.io", [8, 7, 9, 6, 5, 4])
    await repository.insert(done)

    with pytest.raises(ReattemptNotAllowedError) as err:
        await upload(service, candidate)

    summary = err.value.payload["completedInterview"]
    assert summary["_id"] == done.id
    assert summary["totalScore"] == 39
    assert summary["completedAt"] == done.completed_at.isoformat()


async def test_reattempt_permits_a_new_interview(service, repository, candidate):
    done = completed_interview(candidate.id, "A", "a@x.io", [5] * 6)
    await repository.insert(done)
    await CandidateReviewService(repository).set_reattempt_for_interview(done.id, True)

    result = await upload(service, candidate)

    history = await repository.list_for_candidate(candidate.id)
    assert [i.id for i in history] == [result.interview.id, done.id]
    assert (await repository.get(done.id)).status == InterviewStatus.COMPLETED


async def test_in_progress_interview_blocks_new_upload(service, candidate):
    interview = (await upload(service, candidate)).interview
    await service.start(candidate, interview.id)

    with pytest.raises(InterviewStateError) as err:
        await upload(service, candidate)
    assert err.value.payload == {"interviewId": interview.id}


async def test_pending_interview_blocks_new_upload(service, repository, candidate):
    first = (await upload(service, candidate)).interview

    with pytest.raises(InterviewStateError) as err:
        await upload(service, candidate)
    assert err.value.payload == {"interviewId": first.id}
    assert [i.id for i in await repository.list_for_candidate(candidate.id)] == [first.id]


async def test_only_one_interview_runs_at_a_time(service, repository, candidate):
    # two pending interviews left over from before uploads were gated
    first = (await upload(service, candidate)).interview
    second = Interview(candidate_id=candidate.id, questions=fallback_questions())
    await repository.insert(second)

    await service.start(candidate, first.id)
    with pytest.raises(InterviewStateError) as err:
        await service.start(candidate, second.id)
    assert err.value.payload == {"interviewId": first.id}

    statuses = [i.status for i in await repository.list_for_candidate(candidate.id)]
    assert statuses.count(InterviewStatus.IN_PROGRESS) == 1
