"""
Arithmetic on WAL locations and segment names

A WAL location (LSN) is a 64 bit byte offset into the log stream.  The
stream is cut into segments of a fixed, power-of-two size, and each
segment is stored in a file named after the timeline it was written on
and its sequence number.  Following xlog_internal.h:

#define XLogFileName(fname, tli, log, seg) \
 snprintf(fname, MAXFNAMELEN, "%08X%08X%08X", tli, log, seg)

Here ``log`` and ``seg`` are the high and low 32 bits of the segment
sequence number, ``position // segment_size``.

"""
import re

from wal_lineage.exception import InvalidLsn
from wal_lineage.exception import InvalidSegmentSize

INVALID_LSN = 0

MAX_LSN = (1 << 64) - 1

DEFAULT_SEGMENT_SIZE = 16 * 1024 * 1024

IDENTIFIER_REGEXP = r'^([0-9A-F]{8})([0-9A-F]{8})([0-9A-F]{8})$'

LSN_REGEXP = r'^(?P<hi>[0-9A-Fa-f]{1,8})/(?P<lo>[0-9A-Fa-f]{1,8})$'


def check_segment_size(segment_size):
    """
    Reject segment sizes that cannot cut the stream evenly

    >>> check_segment_size(16 * 1024 * 1024)
    16777216
    >>> check_segment_size(3)
    Traceback (most recent call last):
      ...
    wal_lineage.exception.InvalidSegmentSize: invalid WAL segment size \
The segment size 3 is not a positive power of two.

    """
    if (not isinstance(segment_size, int) or segment_size <= 0 or
            segment_size & (segment_size - 1)):
        raise InvalidSegmentSize(segment_size)

    return segment_size


def parse_lsn(text):
    """
    Turn the %X/%X notation into an integer

    >>> parse_lsn('16/B374D848')
    97500059720
    >>> parse_lsn('0/0')
    0

    """
    match = re.match(LSN_REGEXP, text.strip())

    if match is None:
        raise InvalidLsn(text)

    return int(match.group('hi'), 16) << 32 | int(match.group('lo'), 16)


def format_lsn(lsn):
    """
    Inverse of parse_lsn

    >>> format_lsn(97500059720)
    '16/B374D848'

    """
    return '{0:X}/{1:X}'.format(lsn >> 32, lsn & 0xFFFFFFFF)


def segment_sequence(lsn, segment_size):
    """Sequence number of the segment holding byte ``lsn``"""
    return lsn // segment_size


def align_up(lsn, segment_size):
    """
    First segment boundary strictly after ``lsn``

    A location already sitting on a boundary still moves to the next
    one.

    >>> align_up(0, 0x1000000) == 0x1000000
    True
    >>> align_up(0x1000000, 0x1000000) == 0x2000000
    True
    >>> align_up(0x1ffffff, 0x1000000) == 0x2000000
    True

    """
    return (lsn // segment_size + 1) * segment_size


def format_identifier(tli, segno):
    """
    Name of the segment file ``segno`` on timeline ``tli``

    Names sort the same way as (tli, segno) pairs.

    >>> format_identifier(1, 3)
    '000000010000000000000003'
    >>> format_identifier(0x2A, 0x1FFFFFFFF)
    '0000002A00000001FFFFFFFF'

    """
    return '{0:08X}{1:08X}{2:08X}'.format(
        tli, segno >> 32, segno & 0xFFFFFFFF)


def decode_identifier(name):
    """
    Inverse of format_identifier: the (tli, segno) a name stands for

    >>> decode_identifier('000000020000000100000004') == (2, (1 << 32) + 4)
    True

    """
    match = re.match(IDENTIFIER_REGEXP, name)

    if match is None:
        raise ValueError('not a WAL segment name: {0!r}'.format(name))

    tli, log, seg = (int(group, 16) for group in match.groups())
    return tli, log << 32 | seg
