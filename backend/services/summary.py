"""Rule-based completion summary built from the per-difficulty subtotals."""
from models.interview import QUESTIONS_PER_INTERVIEW, DifficultyLevel, Interview

SECTION_LABELS = (
    (DifficultyLevel.EASY, "Fundamentals"),
    (DifficultyLevel.MEDIUM, "Intermediate Skills"),
    (DifficultyLevel.HARD, "Advanced Concepts"),
)

RECOMMENDATIONS = (
    (45, "Strong candidate, proceed to next round. Shows solid understanding across all difficulty levels."),
    (35, "Good candidate with potential. Consider for further technical evaluation or pair programming session."),
    (25, "Average candidate. May benefit from additional training or junior-level position with mentorship."),
)
NEEDS_IMPROVEMENT = "Candidate needs significant improvement in technical skills before considering for this role."


def overall_band(total: int) -> str:
    average = total / QUESTIONS_PER_INTERVIEW
    if average >= 7.5:
        return "Excellent"
    if average >= 6:
        return "Good"
    if average >= 4:
        return "Fair"
    return "Needs Improvement"


def section_band(subtotal: int) -> str:
    if subtotal >= 16:
        return "Strong"
    if subtotal >= 12:
        return "Good"
    return "Weak"


def recommendation(total: int) -> str:
    for threshold, text in RECOMMENDATIONS:
        if total >= threshold:
            return text
    return NEEDS_IMPROVEMENT


def build_summary(interview: Interview) -> str:
    total = interview.total_score
    subtotals = interview.score_by_difficulty()
    parts = [f"Overall Performance: {overall_band(total)} ({total}/60)."]
    for level, label in SECTION_LABELS:
        subtotal = subtotals[level]
        parts.append(f"{label}: {section_band(subtotal)} ({subtotal}/20).")
    parts.append(f"Recommendation: {recommendation(total)}")
    return " ".join(parts)
