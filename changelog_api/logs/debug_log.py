import logging
import sys
import json
import inspect
import traceback
from pathlib import Path

from changelog_api.core import get_settings

log_dir = Path(get_settings().LOG_DIR)
log_dir.mkdir(parents=True, exist_ok=True)

# ANSI colours for console output
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
PURPLE = '\033[95m'
CYAN = '\033[96m'
END = '\033[0m'


def format_object(obj):
    if hasattr(obj, '__dict__'):
        return str({k: v for k, v in obj.__dict__.items() if not k.startswith('_')})
    if isinstance(obj, (list, dict, tuple, set)):
        try:
            return json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(obj)
    return str(obj)


class DebugLogger:
    """Verbose debug logger with caller information and coloured console output"""

    def __init__(self, name="debug", level=logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        )

        file_handler = logging.FileHandler(log_dir / "debug.log", encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def debug(self, message, *args, **kwargs):
        """Debug record prefixed with the caller's location"""
        frame = inspect.currentframe().f_back
        filename = frame.f_code.co_filename
        lineno = frame.f_lineno
        function = frame.f_code.co_name

        try:
            filename = filename[filename.index("changelog_api"):]
        except ValueError:
            pass

        caller_info = f"{BLUE}[{filename}:{lineno} - {function}]{END}"
        self.logger.debug(f"{caller_info} {message}", *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(f"{GREEN}{message}{END}", *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(f"{YELLOW}{message}{END}", *args, **kwargs)

    def error(self, message, *args, **kwargs):
        """Error record, with the active traceback appended when there is one"""
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.error(f"{RED}{message}{END}", *args, **kwargs)

    def log_exception(self, message="Exception raised"):
        exc_type, exc_value, _ = sys.exc_info()
        if exc_type:
            self.error(f"{message}: {exc_type.__name__}: {exc_value}")
        else:
            self.error(message)

    def log_request(self, request, extra_info=None):
        method = getattr(request, 'method', 'UNKNOWN')
        url = str(getattr(request, 'url', 'UNKNOWN'))
        client = getattr(request, 'client', None)
        client_host = client.host if client else "unknown"

        info = (
            f"{CYAN}HTTP request:{END} {method} {url}\n"
            f"{CYAN}Client:{END} {client_host}"
        )
        if extra_info:
            info += f"\n{CYAN}Extra:{END} {extra_info}"

        self.debug(info)

    def log_response(self, response, process_time=None):
        status_code = getattr(response, 'status_code', 0)

        color = GREEN if 200 <= status_code < 400 else YELLOW if 400 <= status_code < 500 else RED
        info = f"{CYAN}HTTP response:{END} {color}Status {status_code}{END}"

        if process_time is not None:
            info += f"\n{CYAN}Process time:{END} {process_time:.3f}s"

        self.debug(info)

    def log_data(self, name, data):
        self.debug(f"{PURPLE}{name}:{END}\n{format_object(data)}")


debug_logger = DebugLogger()
