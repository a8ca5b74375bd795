"""
Exceptions raised on bad input to wal-lineage

Everything here derives from UserException, which carries the three
parts of a PostgreSQL-style report: a message, an optional detail and
an optional hint.  The command line front end logs these verbatim;
library callers may inspect the attributes each subclass sets.

"""
import logging


def _fmt_lsn(lsn):
    # wal_lineage.lsn.format_lsn; lsn imports this module.
    return '{0:X}/{1:X}'.format(lsn >> 32, lsn & 0xFFFFFFFF)


class UserException(Exception):
    """
    Exception to signal an error the user can do something about

    None of these are transient: retrying with the same input fails the
    same way.
    """

    def __init__(self, msg=None, detail=None, hint=None):
        super(UserException, self).__init__(msg)

        self.msg = msg
        self.detail = detail
        self.hint = hint
        self.severity = logging.ERROR

    def __str__(self):
        parts = [self.msg or '']

        if self.detail is not None:
            parts.append(self.detail)

        if self.hint is not None:
            parts.append(self.hint)

        return ' '.join(parts)


class InvalidLsn(UserException):
    def __init__(self, text):
        self.text = text
        super(InvalidLsn, self).__init__(
            msg='invalid WAL location',
            detail='The location "{0}" could not be parsed.'.format(text),
            hint='Write locations as two hexadecimal numbers separated '
            'by a slash, e.g. "0/3000060".')


class InvalidSegmentSize(UserException):
    def __init__(self, size):
        self.size = size
        super(InvalidSegmentSize, self).__init__(
            msg='invalid WAL segment size',
            detail='The segment size {0!r} is not a positive power of two.'
            .format(size))


class TimelineOutOfRange(UserException):
    def __init__(self, tli):
        self.tli = tli
        super(TimelineOutOfRange, self).__init__(
            msg='invalid timeline',
            detail='The timeline {0!r} is not between 1 and {1}.'
            .format(tli, 0xFFFFFFFF))


class LsnOutOfRange(UserException):
    def __init__(self, lsn):
        self.lsn = lsn
        super(LsnOutOfRange, self).__init__(
            msg='invalid WAL location',
            detail='The location {0!r} does not fit in 64 bits.'
            .format(lsn))


class HistoryParseError(UserException):
    """
    A data line of a timeline history could not be used

    ``line`` is the offending line as it appeared in the input and
    ``lineno`` its 1-based position.
    """

    def __init__(self, line, lineno, msg, hint):
        self.line = line
        self.lineno = lineno
        super(HistoryParseError, self).__init__(
            msg='{0}: {1}'.format(msg, line),
            detail='Line {0} of the history data.'.format(lineno),
            hint=hint)


class MissingTimelineId(HistoryParseError):
    def __init__(self, line, lineno):
        super(MissingTimelineId, self).__init__(
            line, lineno, 'syntax error in history file',
            'Expected a numeric timeline ID.')


class MissingSwitchPoint(HistoryParseError):
    def __init__(self, line, lineno):
        super(MissingSwitchPoint, self).__init__(
            line, lineno, 'syntax error in history file',
            'Expected a write-ahead log switchpoint location.')


class NonIncreasingTimeline(HistoryParseError):
    def __init__(self, line, lineno, tli, previous_tli):
        self.tli = tli
        self.previous_tli = previous_tli
        super(NonIncreasingTimeline, self).__init__(
            line, lineno, 'invalid data in history file',
            'Timeline IDs must be in increasing sequence.')


class LineageError(UserException):
    """The history does not connect the origin to the target"""


class OriginNewerThanTarget(LineageError):
    def __init__(self, origin_lsn, target_lsn):
        self.origin_lsn = origin_lsn
        self.target_lsn = target_lsn
        super(OriginNewerThanTarget, self).__init__(
            msg='origin LSN {0} newer than target LSN {1}'.format(
                _fmt_lsn(origin_lsn), _fmt_lsn(target_lsn)))


class OriginTimelineNewerThanTarget(LineageError):
    def __init__(self, origin_tli, target_tli):
        self.origin_tli = origin_tli
        self.target_tli = target_tli
        super(OriginTimelineNewerThanTarget, self).__init__(
            msg='origin timeline {0} newer than target timeline {1}'.format(
                origin_tli, target_tli))


class EmptyHistory(LineageError):
    def __init__(self):
        super(EmptyHistory, self).__init__(
            msg='history data contains no timeline entries',
            hint='Pass the history file of the target timeline.')


class HistoryTimelineNotOlderThanTarget(LineageError):
    def __init__(self, history_tli, target_tli):
        self.history_tli = history_tli
        self.target_tli = target_tli
        super(HistoryTimelineNotOlderThanTarget, self).__init__(
            msg='timeline of last history entry {0} newer than or equal '
            'to target timeline {1}'.format(history_tli, target_tli))


class HistoryEndNewerThanTarget(LineageError):
    def __init__(self, history_end, target_lsn):
        self.history_end = history_end
        self.target_lsn = target_lsn
        super(HistoryEndNewerThanTarget, self).__init__(
            msg='LSN {0} of last history entry newer than target LSN {1}'
            .format(_fmt_lsn(history_end), _fmt_lsn(target_lsn)))


class OriginNotDirectParent(LineageError):
    def __init__(self, origin_tli, origin_lsn):
        self.origin_tli = origin_tli
        self.origin_lsn = origin_lsn
        super(OriginNotDirectParent, self).__init__(
            msg='origin data not a direct parent of target',
            detail='No history entry of timeline {0} covers LSN {1}.'
            .format(origin_tli, _fmt_lsn(origin_lsn)))
