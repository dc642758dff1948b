from linkregistry.utils.config import app_env, app_name, project_root, app_prefix, load_config
from linkregistry.utils.helpers import utcnow, is_absolute_url
from linkregistry.utils.shortener import generate_shortcode, is_valid_shortcode
from linkregistry.utils.logging import initialize_logging, get_guarded_logger


__all__ = [
    'generate_shortcode',
    'is_valid_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'utcnow',
    'is_absolute_url',
    'initialize_logging',
    'get_guarded_logger',
]
