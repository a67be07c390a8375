from .HTTPRequests import get_file_by_url
from .settings import (
                        DEFAULTS,
                        SettingsError,
                        load_settings
)
from .colors import (
                         Colors,
                         supports_color,
                         colorize,
                         print_info,
                         print_success,
                         print_failure
)
