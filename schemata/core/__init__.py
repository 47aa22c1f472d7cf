# Core module exports
from schemata.core.config import settings, get_settings
from schemata.core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    unbind_context,
    generate_correlation_id,
    validation_logger,
    env_logger,
    rpc_logger,
)
