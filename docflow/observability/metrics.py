"""Prometheus metrics for Docflow.

Conversation lifecycle, turn decisions, routing outcomes and phase
transitions.
"""

from prometheus_client import Counter, Gauge

CONVERSATIONS_STARTED = Counter(
    "docflow_conversations_started_total",
    "Total number of conversations started",
    labelnames=["agent_name"],
)

CONVERSATIONS_ENDED = Counter(
    "docflow_conversations_ended_total",
    "Total number of conversations ended",
    labelnames=["agent_name"],
)

ACTIVE_CONVERSATIONS = Gauge(
    "docflow_active_conversations",
    "Number of active conversations",
    labelnames=["agent_name"],
)

CONVERSATION_TURNS = Counter(
    "docflow_conversation_turns_total",
    "Conversation turns processed, by the decision taken",
    labelnames=["agent_name", "decision"],
)

ROUTING_DECISIONS = Counter(
    "docflow_routing_decisions_total",
    "User inputs routed, by destination",
    labelnames=["routed_to"],
)

PHASE_TRANSITIONS = Counter(
    "docflow_phase_transitions_total",
    "Phase transitions executed",
    labelnames=["from_phase", "to_phase", "outcome"],
)

ERRORS = Counter(
    "docflow_errors_total",
    "Total number of errors",
    labelnames=["error_code"],
)
