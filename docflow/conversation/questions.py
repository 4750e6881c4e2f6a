"""Template-driven question generation."""

import re
from uuid import uuid4

from docflow.conversation.interfaces import QuestionGenerator
from docflow.conversation.models import (
    ConversationContext,
    ConversationTurn,
    Question,
    TurnType,
)
from docflow.conversation.templates import (
    BUILT_IN_TEMPLATES,
    DEFAULT_QUESTIONS,
    QuestionTemplate,
)
from docflow.observability.logging import get_logger
from docflow.workflow.phases import normalize_phase

logger = get_logger(__name__)

MAX_INITIAL_QUESTIONS = 5
MAX_FOLLOWUP_QUESTIONS = 3
SHORT_RESPONSE_CHARS = 20
RECENT_QUESTION_WINDOW = 3


class TemplateQuestionGenerator(QuestionGenerator):
    """QuestionGenerator backed by per-agent, per-phase templates.

    Agents without a template for the requested phase get a generic
    default set.
    """

    def __init__(self, templates: list[QuestionTemplate] | None = None) -> None:
        self._templates: dict[tuple[str, str], QuestionTemplate] = {}
        for template in templates if templates is not None else BUILT_IN_TEMPLATES:
            self.update_template(template)

    def get_template(self, agent_name: str, phase: str) -> QuestionTemplate | None:
        return self._templates.get((agent_name, normalize_phase(phase)))

    def update_template(self, template: QuestionTemplate) -> None:
        """Register or replace a template."""
        self._templates[(template.agent_name, normalize_phase(template.phase))] = template

    async def generate_initial_questions(
        self, agent_name: str, context: ConversationContext
    ) -> list[Question]:
        """Primary then secondary questions, filtered, priority-sorted, capped."""
        template = self.get_template(agent_name, context.workflow_phase)
        if template is None:
            logger.debug("question_template_missing", agent_name=agent_name)
            return list(DEFAULT_QUESTIONS)

        questions = [*template.primary, *template.secondary]
        questions = self.filter_relevant(questions, context)
        # sorted() is stable: template order breaks priority ties
        questions = sorted(questions, key=lambda q: q.priority)
        return questions[:MAX_INITIAL_QUESTIONS]

    async def generate_followup_questions(
        self,
        agent_name: str,
        last_response: str,
        history: list[ConversationTurn],
    ) -> list[Question]:
        """Trigger-matched and contextual follow-ups, de-duplicated by text."""
        templates = [t for t in self._templates.values() if t.agent_name == agent_name]
        if not templates:
            return []

        followups: list[Question] = []
        for template in templates:
            for strategy in template.followup_strategies:
                if re.search(strategy.trigger, last_response, re.IGNORECASE):
                    followups.extend(strategy.questions)

        followups.extend(self._contextual_followups(last_response, history))
        return _dedupe(followups)[:MAX_FOLLOWUP_QUESTIONS]

    def filter_relevant(
        self, questions: list[Question], context: ConversationContext
    ) -> list[Question]:
        """Drop questions that do not fit the document type or phase."""
        phase = normalize_phase(context.workflow_phase)
        result = []
        for question in questions:
            if context.document_type == "prd" and "technical-implementation" in question.category:
                continue
            if phase == "prd" and "detailed-requirements" in question.category:
                continue
            result.append(question)
        return result

    def _contextual_followups(
        self, response: str, history: list[ConversationTurn]
    ) -> list[Question]:
        followups = []
        if len(response) < SHORT_RESPONSE_CHARS:
            followups.append(
                Question(
                    id=f"contextual_detail_{uuid4().hex[:8]}",
                    text="Could you provide more detail about that?",
                    required=False,
                    category="clarification",
                    priority=3,
                )
            )

        recent = [turn for turn in history if turn.type == TurnType.QUESTION][
            -RECENT_QUESTION_WINDOW:
        ]
        if recent and "problem" in recent[-1].content and "user" in response:
            followups.append(
                Question(
                    id=f"contextual_user_impact_{uuid4().hex[:8]}",
                    text="How does this problem specifically impact those users?",
                    examples=["Causes delays in their workflow", "Increases their costs"],
                    required=False,
                    category="user-impact",
                    priority=2,
                )
            )
        return followups


def _dedupe(questions: list[Question]) -> list[Question]:
    seen: set[str] = set()
    result = []
    for question in questions:
        key = question.text.strip().lower()
        if key not in seen:
            seen.add(key)
            result.append(question)
    return result
