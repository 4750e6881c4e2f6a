"""Configuration model exports.

    from docflow.config.models import ConversationConfig, StorageConfig
"""

from docflow.config.models.conversation import ConversationConfig
from docflow.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from docflow.config.models.routing import AutoSessionConfig, RoutingConfig
from docflow.config.models.storage import StorageConfig

__all__ = [
    "AutoSessionConfig",
    "ConversationConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "RoutingConfig",
    "StorageConfig",
]
