import logging
import logging.handlers
from pathlib import Path
from typing import Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

class ModuleFileHandler(logging.handlers.RotatingFileHandler):
    """Rotating handler that writes each logger to base_dir/<module path>/module.log"""

    def __init__(self, base_dir: Path, *args, **kwargs):
        self.base_dir = Path(base_dir)
        self.handlers = {}  # logger name -> RotatingFileHandler
        # Placeholder file; records are routed to per-module handlers in emit.
        super().__init__(str(self.base_dir / "fleet_sim.log"), *args, delay=True, **kwargs)

    def emit(self, record):
        try:
            if record.name not in self.handlers:
                module_dir = self.base_dir / record.name.replace('.', '/')
                module_dir.mkdir(parents=True, exist_ok=True)
                handler = logging.handlers.RotatingFileHandler(
                    filename=str(module_dir / "module.log"),
                    maxBytes=self.maxBytes,
                    backupCount=self.backupCount,
                    encoding=self.encoding
                )
                handler.setFormatter(self.formatter)
                self.handlers[record.name] = handler
            self.handlers[record.name].emit(record)
        except Exception:
            self.handleError(record)

    def close(self):
        """Close all handlers"""
        try:
            for handler in self.handlers.values():
                handler.close()
            self.handlers.clear()
        finally:
            super().close()

def configure_logging(
    base_log_dir: Union[str, Path],
    log_level: Union[int, str] = logging.INFO,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """
    Configure global logging for the application.

    This creates a console handler and a module-specific rotating file handler.
    Modules can then simply use logging.getLogger(__name__).

    Args:
        base_log_dir: Base directory for all logs.
        log_level: Console logging level (default: INFO).
        max_bytes: Maximum size of each log file before rotation (default: 10MB).
        backup_count: Number of backup files to keep (default: 5).
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")

    modules_log_dir = Path(base_log_dir) / 'modules'
    modules_log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    module_handler = ModuleFileHandler(
        base_dir=modules_log_dir,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    module_handler.setFormatter(formatter)
    module_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(module_handler)

def cleanup_logging() -> None:
    """
    Clean up logging by removing and closing all handlers.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
