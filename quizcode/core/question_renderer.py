"""HTML rendering of questions and question summaries for the host console."""

from __future__ import annotations

from quizcode.core.markdown_renderer import renderer
from quizcode.core.models import QuizQuestion
from quizcode.core.services.scoring import QuestionSummary

CORRECT_MARKER = " &#10003;"


def _option_label(text: str, placeholder: str) -> str:
    return renderer.render_inline(text) or placeholder


def render_question_preview(question: QuizQuestion) -> str:
    """Render a question with lettered options, marking the correct ones.

    Question and option text are markdown; raw HTML in them is escaped.
    """
    parts = [renderer.render_fragment(question.text, "<p><em>(No question text)</em></p>")]
    for option_index, option in enumerate(question.options):
        marker = CORRECT_MARKER if option.is_correct else ""
        label = _option_label(option.text, "<em>(empty)</em>")
        parts.append(f"<p><b>{chr(ord('A') + option_index)}.</b> {label}{marker}</p>")
    return "".join(parts)


def render_question_summary(summary: QuestionSummary) -> str:
    lines = [
        f"<p><b>Responses:</b> {summary.total_responses} &nbsp; "
        f"<b>Correct:</b> {summary.correct_responses} &nbsp; "
        f"<b>Average time:</b> {summary.average_time:.1f}s</p>",
        "<table width='100%'>",
    ]
    for option in summary.option_breakdown:
        marker = CORRECT_MARKER if option.is_correct else ""
        lines.append(
            f"<tr><td>{_option_label(option.option_text, '')}{marker}</td>"
            f"<td align='right'>{option.count}</td>"
            f"<td align='right'>{option.percentage:.1f}%</td></tr>"
        )
    lines.append("</table>")
    return "".join(lines)
