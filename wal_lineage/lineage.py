"""
Checks that a timeline history connects an origin to a target

The origin is where a standby currently is, as (timeline, location);
the target is where it has to get to.  The history is that of the
target timeline, so it must describe only ancestors of the target and
the origin must lie on one of the spans it records.

"""
from wal_lineage.exception import EmptyHistory
from wal_lineage.exception import HistoryEndNewerThanTarget
from wal_lineage.exception import HistoryTimelineNotOlderThanTarget
from wal_lineage.exception import LsnOutOfRange
from wal_lineage.exception import OriginNewerThanTarget
from wal_lineage.exception import OriginNotDirectParent
from wal_lineage.exception import OriginTimelineNewerThanTarget
from wal_lineage.exception import TimelineOutOfRange
from wal_lineage.history import TimelineSegment
from wal_lineage.lsn import MAX_LSN

MAX_TIMELINE = 0xFFFFFFFF


def spans(entry, lsn):
    """
    True if ``lsn`` falls within ``entry``, both ends included

    >>> spans(TimelineSegment(1, 0, 0x3000000), 0x3000000)
    True
    >>> spans(TimelineSegment(2, 0x3000000, 0x5000000), 0x2FFFFFF)
    False

    """
    return entry.begin <= lsn <= entry.end


def check_endpoints(origin_tli, origin_lsn, target_tli, target_lsn):
    if origin_lsn > target_lsn:
        raise OriginNewerThanTarget(origin_lsn, target_lsn)

    if origin_tli > target_tli:
        raise OriginTimelineNewerThanTarget(origin_tli, target_tli)

    # Names are only fixed width for 32 bit timelines and 64 bit LSNs.
    for tli in (origin_tli, target_tli):
        if not 1 <= tli <= MAX_TIMELINE:
            raise TimelineOutOfRange(tli)

    for lsn in (origin_lsn, target_lsn):
        if not 0 <= lsn <= MAX_LSN:
            raise LsnOutOfRange(lsn)


def find_origin(origin_tli, origin_lsn, entries):
    """
    History entry of timeline ``origin_tli`` covering ``origin_lsn``

    The first match wins.  Raises OriginNotDirectParent when there is
    none.
    """
    for entry in entries:
        if entry.tli == origin_tli and spans(entry, origin_lsn):
            return entry

    raise OriginNotDirectParent(origin_tli, origin_lsn)


def validate(origin_tli, origin_lsn, target_tli, target_lsn, entries):
    """
    Check origin, target and history against each other

    On success returns a pair: a new list holding ``entries`` followed
    by one entry for the target timeline, running from the end of the
    history up to ``target_lsn``; and the history entry the origin lies
    on.  ``entries`` itself is left alone.
    """
    check_endpoints(origin_tli, origin_lsn, target_tli, target_lsn)

    if not entries:
        raise EmptyHistory()

    last = entries[-1]

    if last.tli >= target_tli:
        raise HistoryTimelineNotOlderThanTarget(last.tli, target_tli)

    if last.end > target_lsn:
        raise HistoryEndNewerThanTarget(last.end, target_lsn)

    origin_entry = find_origin(origin_tli, origin_lsn, entries)

    extended = list(entries)
    extended.append(TimelineSegment(tli=target_tli,
                                    begin=last.end,
                                    end=target_lsn))

    return extended, origin_entry
