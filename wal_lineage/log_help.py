"""
A module to assist with using the Python logging module

"""
import logging
import logging.handlers
import sys

# Global logging handlers created by configure.
HANDLERS = []


class IndentFormatter(logging.Formatter):
    """Indent continuation lines so multi-line records stay grouped"""

    def format(self, record, *args, **kwargs):
        formatted = logging.Formatter.format(self, record, *args, **kwargs)
        return formatted.replace('\n', '\n        ')


def configure(syslog_address=None, level=logging.INFO, stream=None):
    """
    Set up logging for the wal-lineage command line

    Records always go to ``stream`` (standard error by default).  When
    ``syslog_address`` is given they are also sent to syslog; an address
    that cannot be connected to only produces a warning.
    """
    root = logging.getLogger()

    for handler in HANDLERS:
        root.removeHandler(handler)
    del HANDLERS[:]

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(IndentFormatter(
        'wal-lineage %(levelname)s %(asctime)-15s %(message)s'))
    HANDLERS.append(stream_handler)

    syslog_problem = None
    if syslog_address is not None:
        try:
            syslog_handler = logging.handlers.SysLogHandler(
                address=str(syslog_address))
        except EnvironmentError as e:
            syslog_problem = e
        else:
            syslog_handler.setFormatter(
                logging.Formatter('wal_lineage: %(message)s'))
            HANDLERS.append(syslog_handler)

    for handler in HANDLERS:
        root.addHandler(handler)

    root.setLevel(level)

    if syslog_problem is not None:
        WalLineageLogger(__name__).warning(
            msg='could not set up syslog logging',
            detail=str(syslog_problem),
            structured={'address': syslog_address})


class WalLineageLogger(object):
    def __init__(self, *args, **kwargs):
        self._logger = logging.getLogger(*args, **kwargs)

    @staticmethod
    def _fmt_structured(d):
        return ' '.join('='.join((str(k), str(v))) for k, v in d.items())

    @staticmethod
    def fmt_logline(msg, detail=None, hint=None, structured=None):
        msg_parts = ['MSG: ' + msg]

        if detail is not None:
            msg_parts.append('DETAIL: ' + detail)
        if hint is not None:
            msg_parts.append('HINT: ' + hint)

        if structured:
            msg_parts.append('STRUCTURED: ' +
                             WalLineageLogger._fmt_structured(structured))

        return '\n'.join(msg_parts)

    def log(self, level, msg, *args, **kwargs):
        detail = kwargs.pop('detail', None)
        hint = kwargs.pop('hint', None)
        structured = kwargs.pop('structured', None)

        self._logger.log(
            level,
            self.fmt_logline(msg, detail, hint, structured),
            *args, **kwargs)

    # Convenience shims to the different logging levels.

    def debug(self, *args, **kwargs):
        self.log(logging.DEBUG, *args, **kwargs)

    def info(self, *args, **kwargs):
        self.log(logging.INFO, *args, **kwargs)

    def warning(self, *args, **kwargs):
        self.log(logging.WARNING, *args, **kwargs)

    def error(self, *args, **kwargs):
        self.log(logging.ERROR, *args, **kwargs)

    def critical(self, *args, **kwargs):
        self.log(logging.CRITICAL, *args, **kwargs)
