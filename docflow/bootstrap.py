"""Bootstrap module for wiring the Docflow stack from configuration.

Handles:
- Logging setup from the observability settings
- Selecting the host state store (in-memory or redis)
- Creating the conversation engine with its default collaborators
- Creating the agent directory, auto-session manager and session router
- Restoring persisted router and auto-session state

Example usage:

    from docflow.bootstrap import bootstrap

    stack = await bootstrap()

    session = await stack.router.start_session("prd-creator", context)
    result = await stack.router.route_user_input("A budgeting app for students")
"""

from dataclasses import dataclass

from redis.asyncio import Redis

from docflow.agents.directory import InMemoryAgentDirectory
from docflow.config import get_settings
from docflow.config.models.storage import StorageConfig
from docflow.config.settings import Settings
from docflow.conversation.analysis import HeuristicResponseAnalyzer
from docflow.conversation.engine import ConversationEngine
from docflow.conversation.questions import TemplateQuestionGenerator
from docflow.observability.logging import get_logger, setup_logging
from docflow.providers.llm import LLMProvider, MockLLMProvider
from docflow.routing.autosession import AutoSessionStateManager
from docflow.routing.router import SessionRouter
from docflow.routing.stores import InMemoryStateStore, RedisStateStore, StateStore
from docflow.workflow.content import MarkdownContentCapture
from docflow.workflow.orchestrator import WorkflowOrchestrator

logger = get_logger(__name__)


@dataclass
class DocflowStack:
    """Everything bootstrap wires together."""

    settings: Settings
    state_store: StateStore
    content_capture: MarkdownContentCapture
    orchestrator: WorkflowOrchestrator
    engine: ConversationEngine
    directory: InMemoryAgentDirectory
    auto_session: AutoSessionStateManager
    router: SessionRouter


def create_state_store(config: StorageConfig) -> StateStore:
    """Create the host state store selected by configuration.

    Raises:
        ValueError: If the backend type is not supported
    """
    backend = config.state_backend

    if backend == "inmemory":
        logger.info("creating_state_store", backend="inmemory")
        return InMemoryStateStore()

    if backend == "redis":
        logger.info(
            "creating_state_store",
            backend="redis",
            key_prefix=config.key_prefix,
            ttl_seconds=config.ttl_seconds,
        )
        return RedisStateStore(
            Redis.from_url(config.redis_url),
            key_prefix=config.key_prefix,
            ttl_seconds=config.ttl_seconds,
        )

    raise ValueError(f"Unsupported state backend: {backend}")


async def bootstrap(
    settings: Settings | None = None,
    provider: LLMProvider | None = None,
    restore_state: bool = True,
) -> DocflowStack:
    """Build a fully wired stack.

    Args:
        settings: Configuration (default: get_settings())
        provider: Language-model client for agents (default: mock provider)
        restore_state: Load persisted router and auto-session state

    Returns:
        The wired DocflowStack
    """
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    state_store = create_state_store(settings.storage)
    content_capture = MarkdownContentCapture(settings.workspace_root)
    orchestrator = WorkflowOrchestrator(content_capture)
    engine = ConversationEngine(
        TemplateQuestionGenerator(),
        HeuristicResponseAnalyzer(),
        orchestrator=orchestrator,
        content_capture=content_capture,
        config=settings.conversation,
    )
    directory = InMemoryAgentDirectory(provider or MockLLMProvider())
    auto_session = AutoSessionStateManager(state_store, settings.auto_session)
    router = SessionRouter(
        engine,
        directory,
        auto_session=auto_session,
        state_store=state_store,
        config=settings.routing,
    )

    if restore_state:
        await auto_session.load()
        await router.load_state()

    logger.info(
        "docflow_bootstrapped",
        state_backend=settings.storage.state_backend,
        workspace_root=settings.workspace_root,
    )
    return DocflowStack(
        settings=settings,
        state_store=state_store,
        content_capture=content_capture,
        orchestrator=orchestrator,
        engine=engine,
        directory=directory,
        auto_session=auto_session,
        router=router,
    )
