from tradesignals.logging.logger import resolve_level, setup_engine_logging, setup_logger

__all__ = ["resolve_level", "setup_engine_logging", "setup_logger"]
