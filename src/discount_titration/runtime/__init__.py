"""Session runtime: orchestration loop and config-driven setup."""

from .config import (
    ComponentRef,
    build_responder_from_config,
    load_config,
    responder_ref_from_mapping,
    session_config_from_mapping,
)
from .session import (
    SessionConfig,
    SessionContext,
    SessionSummary,
    run_session,
)

__all__ = [
    "ComponentRef",
    "SessionConfig",
    "SessionContext",
    "SessionSummary",
    "build_responder_from_config",
    "load_config",
    "responder_ref_from_mapping",
    "run_session",
    "session_config_from_mapping",
]
