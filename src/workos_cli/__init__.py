from .config import CLISettings, LogLevel, load_settings_from_env
from .tuples import (
    RelationTuple,
    CheckRequest,
    AssignmentRequest,
    WarrantOp,
    parse_token,
    parse_subject,
    build_check_request,
    build_assignment,
    parse_tuple,
    format_tuple,
    render_decision_tree,
)
from .profiles import Profile, ProfileStore, load_profile_store
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    CLIFormatter,
    setup_logging,
)
from .sdk import WorkOSClient, client_for_profile

__version__ = "0.1.0"

__all__ = [
    'CLISettings',
    'LogLevel',
    'load_settings_from_env',
    'RelationTuple',
    'CheckRequest',
    'AssignmentRequest',
    'WarrantOp',
    'parse_token',
    'parse_subject',
    'build_check_request',
    'build_assignment',
    'parse_tuple',
    'format_tuple',
    'render_decision_tree',
    'Profile',
    'ProfileStore',
    'load_profile_store',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'CLIFormatter',
    'setup_logging',
    'WorkOSClient',
    'client_for_profile',
]
