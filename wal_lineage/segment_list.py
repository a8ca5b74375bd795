"""
Listing the WAL segments between two points of a lineage

When a server switches to a new timeline it does not finish the
segment it was writing: the first record of the new timeline goes to a
fresh segment file named with the new timeline, even though it covers
the same range of locations as the abandoned one.  So which timeline a
segment has to be fetched from depends on which history entry was
active at that location, and the walk below is driven by the entries.

"""
from wal_lineage import history
from wal_lineage import lineage
from wal_lineage import log_help
from wal_lineage.lsn import DEFAULT_SEGMENT_SIZE
from wal_lineage.lsn import align_up
from wal_lineage.lsn import check_segment_size
from wal_lineage.lsn import format_identifier
from wal_lineage.lsn import format_lsn
from wal_lineage.lsn import segment_sequence

logger = log_help.WalLineageLogger(__name__)


def enumerate_segments(origin_lsn, target_tli, target_lsn, entries,
                       segment_size):
    """
    Walk ``entries`` from ``origin_lsn`` and name every segment passed

    ``entries`` must already end with the target's own entry, as
    returned by lineage.validate.  The segment holding ``origin_lsn``
    is not listed: the standby already has it.  The segment holding
    ``target_lsn`` is always listed last, even if the walk has just
    listed it.
    """
    segments = []
    current_seg_lsn = align_up(origin_lsn, segment_size)

    for entry in entries:
        while entry.begin <= current_seg_lsn < entry.end:
            segments.append(format_identifier(
                entry.tli, segment_sequence(current_seg_lsn, segment_size)))
            current_seg_lsn += segment_size

    segments.append(format_identifier(
        target_tli, segment_sequence(target_lsn, segment_size)))

    return segments


def build_segment_list(origin_tli, origin_lsn, target_tli, target_lsn,
                       history_text, segment_size=DEFAULT_SEGMENT_SIZE):
    """
    Segments a standby at the origin must fetch to reach the target

    ``history_text`` is the content of the target timeline's history
    file.  Origin and target are checked against each other before the
    history is even parsed.  Raises a UserException subclass on any
    inconsistency; no partial list is ever returned.

    >>> build_segment_list(1, 0, 2, 0x5000000, '1\\t0/3000000\\n')
    ... # doctest: +NORMALIZE_WHITESPACE
    ['000000010000000000000001', '000000010000000000000002',
     '000000020000000000000003', '000000020000000000000004',
     '000000020000000000000005']

    """
    check_segment_size(segment_size)
    lineage.check_endpoints(origin_tli, origin_lsn, target_tli, target_lsn)

    entries = history.parse(history_text)
    extended, origin_entry = lineage.validate(
        origin_tli, origin_lsn, target_tli, target_lsn, entries)

    segments = enumerate_segments(origin_lsn, target_tli, target_lsn,
                                  extended, segment_size)

    logger.debug(
        msg='built WAL segment list',
        structured={'origin': '{0}@{1}'.format(origin_tli,
                                               format_lsn(origin_lsn)),
                    'origin_span_end': format_lsn(origin_entry.end),
                    'target': '{0}@{1}'.format(target_tli,
                                               format_lsn(target_lsn)),
                    'segments': len(segments)})

    return segments
