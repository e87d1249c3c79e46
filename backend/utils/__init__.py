from .logs import humanize_milliseconds, setup_logs, time_it

__all__ = ["humanize_milliseconds", "setup_logs", "time_it"]
