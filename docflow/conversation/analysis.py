"""Heuristic response analysis."""

import re

from docflow.conversation.interfaces import ResponseAnalyzer
from docflow.conversation.models import Entity, Question, QuestionKind, ResponseAnalysis

MIN_RESPONSE_CHARS = 10
SHORT_RESPONSE_CHARS = 20
MAX_SUGGESTIONS = 3
VAGUE_WORD_RATIO = 0.3

VAGUE_WORDS = frozenset({"thing", "stuff", "something", "somehow"})
BARE_ANSWER = re.compile(r"^(yes|no|maybe|sure|ok)$", re.IGNORECASE)

ENTITY_PATTERNS: dict[str, re.Pattern[str]] = {
    "technology": re.compile(
        r"\b(api|database|server|cloud|aws|azure|docker|kubernetes|react|angular"
        r"|vue|node|python|java|javascript|typescript)\b"
    ),
    "metric": re.compile(
        r"\b(\d+(?:\.\d+)?)\s*(ms|seconds?|minutes?|hours?|%|percent|users?"
        r"|requests?|mb|gb|tb)(?!\w)"
    ),
    "role": re.compile(r"\b(user|admin|customer|developer|manager|analyst|stakeholder)\b"),
    "action": re.compile(
        r"\b(create|read|update|delete|login|logout|authenticate|authorize"
        r"|process|generate|validate)\b"
    ),
    "business_term": re.compile(
        r"\b(revenue|profit|cost|roi|conversion|engagement|retention|acquisition)\b"
    ),
}

ENTITY_CONFIDENCE: dict[str, float] = {
    "technology": 0.9,
    "metric": 0.95,
    "role": 0.8,
    "action": 0.7,
    "business_term": 0.8,
}

EXAMPLE_INDICATORS = ("example", "for instance", "such as", "like", "including")
METRIC_PATTERN = re.compile(
    r"\b(\d+(?:\.\d+)?)\s*(%|percent|ms|seconds?|minutes?|hours?|users?|requests?)(?!\w)",
    re.IGNORECASE,
)
STRUCTURE_PATTERN = re.compile(r"(\*|-|\d+\.|\n|:)")


class HeuristicResponseAnalyzer(ResponseAnalyzer):
    """ResponseAnalyzer built from length, wording and regex heuristics."""

    async def analyze(self, response: str, question: Question) -> ResponseAnalysis:
        text = response.strip()
        completeness = self.completeness(text, question)
        clarity = self.clarity(text)
        entities = self.extract_entities(text)
        entity_bonus = min(0.2, len(entities) * 0.05)
        return ResponseAnalysis(
            completeness=completeness,
            clarity=clarity,
            extracted_entities=entities,
            suggested_followups=self.suggest_followups(text, question),
            needs_clarification=self.needs_clarification(text, question),
            confidence=min(1.0, (completeness + clarity) / 2 + entity_bonus),
        )

    def needs_clarification(self, text: str, question: Question) -> bool:
        """Too short, a bare yes/no to an open question, or mostly vague words."""
        if len(text) < MIN_RESPONSE_CHARS:
            return True
        if question.kind == QuestionKind.OPEN_ENDED and BARE_ANSWER.match(text):
            return True
        words = text.lower().split()
        vague = sum(1 for word in words if word in VAGUE_WORDS)
        return vague > len(words) * VAGUE_WORD_RATIO

    def completeness(self, text: str, question: Question) -> float:
        if len(text) < MIN_RESPONSE_CHARS:
            score = 0.2
        elif len(text) < 50:
            score = 0.5
        elif len(text) < 200:
            score = 0.8
        else:
            score = 1.0

        if question.kind == QuestionKind.STRUCTURED and not STRUCTURE_PATTERN.search(text):
            score *= 0.7
        if question.examples and _has_examples(text):
            score = min(1.0, score + 0.1)
        return score

    def clarity(self, text: str) -> float:
        sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
        if not sentences:
            return 0.2

        score = 0.8
        average_length = len(text) / len(sentences)
        if average_length < 5 or average_length > 100:
            score -= 0.2
        if not re.search(r"[.!?]", text) and len(text) > 20:
            score -= 0.1
        words = text.lower().split()
        if words and len(set(words)) / len(words) < 0.5:
            score -= 0.2
        return max(0.1, round(score, 2))

    def extract_entities(self, text: str) -> list[Entity]:
        """Regex entities; overlapping matches keep the higher confidence."""
        lowered = text.lower()
        found = []
        for entity_type, pattern in ENTITY_PATTERNS.items():
            for match in pattern.finditer(lowered):
                found.append(
                    Entity(
                        type=entity_type,
                        value=match.group(0),
                        confidence=ENTITY_CONFIDENCE.get(entity_type, 0.6),
                        start_index=match.start(),
                        end_index=match.end(),
                    )
                )
        return _remove_overlaps(found)

    def suggest_followups(self, text: str, question: Question) -> list[str]:
        lowered = text.lower()
        suggestions = []
        if len(text) < SHORT_RESPONSE_CHARS:
            suggestions.append("Could you provide more detail about that?")
        if "problem" in question.category and "user" in lowered:
            suggestions.append("How does this problem specifically impact those users?")
        if "solution" in question.category and "how" not in lowered:
            suggestions.append("How would you implement this solution?")
        if "success" in question.category and not METRIC_PATTERN.search(lowered):
            suggestions.append("What specific metrics would you use to measure success?")
        for trigger in question.followup_triggers:
            if trigger.lower() in lowered:
                suggestions.append(f"Tell me more about the {trigger} aspect.")
        return suggestions[:MAX_SUGGESTIONS]


def _has_examples(text: str) -> bool:
    lowered = text.lower()
    return any(indicator in lowered for indicator in EXAMPLE_INDICATORS)


def _overlaps(a: Entity, b: Entity) -> bool:
    return a.start_index < b.end_index and b.start_index < a.end_index


def _remove_overlaps(entities: list[Entity]) -> list[Entity]:
    result: list[Entity] = []
    for entity in sorted(entities, key=lambda e: e.start_index):
        clash = next((kept for kept in result if _overlaps(entity, kept)), None)
        if clash is None:
            result.append(entity)
        elif entity.confidence > clash.confidence:
            result[result.index(clash)] = entity
    return result
