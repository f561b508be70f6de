"""settled: capture the outcome of concurrent work instead of raising.

Flat imports (preferred):
    from settled import capture, capture_sync, Success, Failure, Outcome
    from settled import CancelToken, delay, join, OnError, settle_all

Submodule imports (for organization):
    from settled.outcome import Success, Failure, partition
    from settled.capture import capture, capture_sync
    from settled.decorators import captured, captured_sync
"""

# Configuration and logging
from settled._config import RuntimeConfig, get_config, init, is_initialized, reset
from settled._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)

# Cancellation
from settled.cancel import CancelToken, delay

# Capture
from settled.capture import capture, capture_sync

# Decorators
from settled.decorators import captured, captured_sync

# Errors
from settled.errors import Cancelled, CancelledError, Unwrap, UnwrapError

# Join
from settled.join import OnError, join, settle_all

# Outcome types
from settled.outcome import (
    Failure,
    Outcome,
    Success,
    is_failure,
    is_success,
    partition,
)

__all__ = [
    'CancelToken',
    'Cancelled',
    'CancelledError',
    'Failure',
    'OnError',
    'Outcome',
    'RuntimeConfig',
    'Success',
    'Unwrap',
    'UnwrapError',
    'add_log_hook',
    'capture',
    'capture_sync',
    'captured',
    'captured_sync',
    'clear_log_hooks',
    'configure_logging',
    'delay',
    'get_config',
    'get_logger',
    'init',
    'is_failure',
    'is_initialized',
    'is_success',
    'join',
    'partition',
    'remove_log_hook',
    'reset',
    'settle_all',
]
