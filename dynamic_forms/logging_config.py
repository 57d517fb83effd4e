"""
Logging configuration using structlog.

dynamic_forms modules log through ``structlog.get_logger(__name__)``. Host
applications that already configure structlog need nothing from here;
standalone users can call setup_logging() and hand the result to
``logging.config.dictConfig`` (or to Django's LOGGING setting).
"""

# Import stdlib logging explicitly to avoid shadowing issues
import logging as stdlib_logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import structlog

logging = stdlib_logging


class SuffixTimedRotatingFileHandler(TimedRotatingFileHandler):
    """
    TimedRotatingFileHandler that accepts suffix in constructor.

    This allows a dictConfig handler entry to set the suffix directly.
    """
    def __init__(self, filename, when='h', interval=1, backupCount=0, encoding=None,
                 delay=False, utc=False, atTime=None, suffix=None):
        super().__init__(filename, when, interval, backupCount, encoding, delay, utc, atTime)
        if suffix is not None:
            self.suffix = suffix


def _shared_processors():
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(base_dir=None, level='INFO'):
    """
    Configure structlog and return a dictConfig LOGGING dict.

    This function is idempotent - safe to call multiple times. structlog is
    only configured once, but the full dict is always returned.

    Args:
        base_dir: When given, JSON lines are also written to
                  ``base_dir/logs/dynamic_forms.jsonl`` with daily rotation.
        level: Level of the ``dynamic_forms`` logger.

    Returns:
        dict: logging configuration dictionary
    """
    if not structlog.is_configured():
        structlog.configure(
            processors=_shared_processors() + [
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
            'level': level,
        },
    }

    if base_dir is not None:
        logs_dir = Path(base_dir) / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            '()': 'dynamic_forms.logging_config.SuffixTimedRotatingFileHandler',
            'filename': str(logs_dir / 'dynamic_forms.jsonl'),
            'when': 'midnight',
            'interval': 1,
            'backupCount': 30,
            'encoding': 'utf-8',
            'utc': True,
            'suffix': '%Y-%m-%d.jsonl',
            'formatter': 'json',
            'level': 'DEBUG',
        }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'console': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processor': structlog.dev.ConsoleRenderer(colors=True),
                'foreign_pre_chain': _shared_processors(),
            },
            'json': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processor': structlog.processors.JSONRenderer(),
                'foreign_pre_chain': _shared_processors(),
            },
        },
        'handlers': handlers,
        'loggers': {
            'dynamic_forms': {
                'handlers': list(handlers),
                'level': level,
                'propagate': False,
            },
        },
    }
