"""
Parsing of timeline history files

When a server is promoted it starts a new timeline and writes a
history file, named after the new timeline:

#define TLHistoryFilePath(path, tli) \
 snprintf(path, MAXPGPATH, XLOGDIR "/%08X.history", tli)

Each data line names an ancestor timeline and the location at which
history switched away from it, followed by free text giving the
reason:

    1	0/3000000	no recovery target specified

Blank lines and lines starting with '#' are ignored.

"""
import collections
import re

from wal_lineage import log_help
from wal_lineage.exception import MissingSwitchPoint
from wal_lineage.exception import MissingTimelineId
from wal_lineage.exception import NonIncreasingTimeline
from wal_lineage.lsn import INVALID_LSN

logger = log_help.WalLineageLogger(__name__)

# Timeline IDs are unsigned decimal; the switch point is %X/%X.
_tli_re = re.compile(r'\s*([0-9]+)')
_switchpoint_re = re.compile(r'\s*([0-9A-Fa-f]+)/\s*([0-9A-Fa-f]+)')

# One span of history: WAL on timeline ``tli`` from ``begin`` up to
# ``end``, where the next timeline forked.
TimelineSegment = collections.namedtuple('TimelineSegment',
                                         ['tli', 'begin', 'end'])

# A TimelineSegment as handed to callers, with INVALID_LSN shown as
# None.
HistoryRow = collections.namedtuple('HistoryRow',
                                    ['timeline', 'begin', 'end'])


def history_file_name(tli):
    """
    Name of the history file written when ``tli`` was created

    >>> history_file_name(2)
    '00000002.history'

    """
    return '{0:08X}.history'.format(tli)


def _read_uint32(digits, base):
    value = int(digits, base)

    if value > 0xFFFFFFFF:
        return None

    return value


def _read_fields(line):
    """
    Read the timeline and switch point of a data line

    Returns the fields that could be read, in order, stopping at the
    first one that could not.
    """
    fields = []

    tli_match = _tli_re.match(line)
    if tli_match is None:
        return fields

    tli = _read_uint32(tli_match.group(1), 10)
    if tli is None:
        return fields
    fields.append(tli)

    point_match = _switchpoint_re.match(line, tli_match.end())
    if point_match is None:
        return fields

    for digits in point_match.groups():
        value = _read_uint32(digits, 16)
        if value is None:
            return fields
        fields.append(value)

    return fields


def parse(text):
    """
    Parse history text into a list of TimelineSegment

    Entries come back oldest timeline first.  Each entry begins where
    the previous one ended; the first begins at INVALID_LSN.

    >>> parse('1\\t0/3000000\\n')
    [TimelineSegment(tli=1, begin=0, end=50331648)]
    >>> parse('# nothing here\\n\\n')
    []

    """
    entries = []
    last_tli = 0
    prev_end = INVALID_LSN

    for lineno, line in enumerate(text.split('\n'), 1):
        stripped = line.lstrip()
        if not stripped or stripped.startswith('#'):
            continue

        fields = _read_fields(line)

        if len(fields) < 1:
            raise MissingTimelineId(line, lineno)

        if len(fields) != 3:
            raise MissingSwitchPoint(line, lineno)

        tli, switchpoint_hi, switchpoint_lo = fields

        if tli <= last_tli:
            raise NonIncreasingTimeline(line, lineno, tli, last_tli)

        last_tli = tli

        entry = TimelineSegment(tli=tli, begin=prev_end,
                                end=switchpoint_hi << 32 | switchpoint_lo)
        prev_end = entry.end

        entries.append(entry)

    logger.debug(msg='parsed timeline history',
                 structured={'entries': len(entries),
                             'last_tli': last_tli})

    return entries


def _or_none(lsn):
    if lsn == INVALID_LSN:
        return None

    return lsn


def parse_history(text):
    """
    Parse history text for display

    Same as parse(), except locations equal to INVALID_LSN are given as
    None.

    >>> parse_history('1\\t0/0\\n')
    [HistoryRow(timeline=1, begin=None, end=None)]

    """
    return [HistoryRow(timeline=entry.tli,
                       begin=_or_none(entry.begin),
                       end=_or_none(entry.end))
            for entry in parse(text)]
