"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from docflow.observability.metrics import (
    ACTIVE_CONVERSATIONS,
    CONVERSATION_TURNS,
    ERRORS,
    PHASE_TRANSITIONS,
    ROUTING_DECISIONS,
)


def sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestCounters:
    """Counters accept their declared labels."""

    def test_turn_counter_increment(self) -> None:
        before = sample(
            "docflow_conversation_turns_total", agent_name="metrics-test", decision="followup"
        )
        CONVERSATION_TURNS.labels(agent_name="metrics-test", decision="followup").inc()
        after = sample(
            "docflow_conversation_turns_total", agent_name="metrics-test", decision="followup"
        )
        assert after == before + 1

    def test_routing_counter_increment(self) -> None:
        before = sample("docflow_routing_decisions_total", routed_to="agent")
        ROUTING_DECISIONS.labels(routed_to="agent").inc()
        assert sample("docflow_routing_decisions_total", routed_to="agent") == before + 1

    def test_phase_and_error_counters(self) -> None:
        PHASE_TRANSITIONS.labels(from_phase="prd", to_phase="design", outcome="success").inc()
        ERRORS.labels(error_code="CONTINUE_CONVERSATION_FAILED").inc()


class TestActiveConversations:
    def test_gauge_inc_dec(self) -> None:
        gauge = ACTIVE_CONVERSATIONS.labels(agent_name="gauge-test")
        gauge.inc()
        gauge.dec()
        assert sample("docflow_active_conversations", agent_name="gauge-test") == 0.0
