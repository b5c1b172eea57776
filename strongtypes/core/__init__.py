# Core module exports
from strongtypes.core.config import settings, get_settings
from strongtypes.core.logging import (
    configure_logging,
    get_logger,
    resolver_logger,
    generator_logger,
    adapter_logger,
)
