import pytest

from wal_lineage.exception import HistoryParseError
from wal_lineage.exception import MissingSwitchPoint
from wal_lineage.exception import MissingTimelineId
from wal_lineage.exception import NonIncreasingTimeline
from wal_lineage.history import *
from wal_lineage.lsn import INVALID_LSN

# What a server promoted three times leaves in 00000004.history.
THREE_SWITCHES = """1\t0/3000000\tno recovery target specified

2\t0/5000060\tbefore 2000-01-01 00:00:00+00
3\t1/A2000000\tat restore point "daily"
"""


def test_single_line():
    assert parse('1\t0/0\n') == [TimelineSegment(1, INVALID_LSN, INVALID_LSN)]


def test_single_line_for_display():
    rows = parse_history('1\t0/0\n')

    assert rows == [HistoryRow(timeline=1, begin=None, end=None)]


def test_entries_are_contiguous():
    entries = parse(THREE_SWITCHES)

    assert [e.tli for e in entries] == [1, 2, 3]
    assert entries[0].begin == INVALID_LSN
    assert [e.end for e in entries] == [0x3000000, 0x5000060,
                                        0x1A2000000]

    for previous, entry in zip(entries, entries[1:]):
        assert entry.begin == previous.end


def test_display_rows():
    assert parse_history(THREE_SWITCHES) == [
        HistoryRow(1, None, 0x3000000),
        HistoryRow(2, 0x3000000, 0x5000060),
        HistoryRow(3, 0x5000060, 0x1A2000000)]


def test_reparse_is_identical():
    assert parse(THREE_SWITCHES) == parse(THREE_SWITCHES)


def test_empty_input():
    assert parse('') == []
    assert parse_history('') == []


def test_comments_and_blank_lines_ignored():
    commented = ('# history of timeline 3\n'
                 '   \t\n'
                 '  # 9\t0/0\tignored, not a data line\n'
                 '1\t0/3000000\n'
                 '\n'
                 '#0\tF/F\n'
                 '2\t0/5000000\n')

    assert parse(commented) == parse('1\t0/3000000\n2\t0/5000000\n')


def test_comment_only_input():
    assert parse('# nothing\n   # at all\n\n') == []


def test_any_whitespace_separates_fields():
    assert parse('  1 0/3000000\n2\t\t0/5000000\n') == [
        TimelineSegment(1, INVALID_LSN, 0x3000000),
        TimelineSegment(2, 0x3000000, 0x5000000)]


def test_trailing_text_ignored():
    entries = parse('1\t0/3000000\tsome reason\twith tabs\n'
                    '2\t0/5000000 and more')

    assert [e.end for e in entries] == [0x3000000, 0x5000000]


def test_lowercase_hex_and_crlf():
    assert parse('1\t0/3a000000\r\n\r\n') == [
        TimelineSegment(1, INVALID_LSN, 0x3A000000)]


def test_no_trailing_newline():
    assert parse('1\t0/3000000') == parse('1\t0/3000000\n')


def test_missing_timeline_id():
    with pytest.raises(MissingTimelineId) as e:
        parse('abc\t0/0')

    assert e.value.line == 'abc\t0/0'
    assert e.value.lineno == 1
    assert e.value.hint == 'Expected a numeric timeline ID.'
    assert 'abc\t0/0' in e.value.msg


def test_timeline_id_out_of_range():
    with pytest.raises(MissingTimelineId):
        parse('4294967296\t0/0\n')


def test_missing_switch_point():
    for line in ('1', '1\t', '1\t0', '1\t0/', '1\tzz/0', '1/0',
                 '1\t100000000/0'):
        with pytest.raises(MissingSwitchPoint) as e:
            parse('# header\n' + line + '\n')

        assert e.value.line == line
        assert e.value.lineno == 2
        assert e.value.hint == ('Expected a write-ahead log switchpoint '
                                'location.')


def test_decreasing_timeline():
    with pytest.raises(NonIncreasingTimeline) as e:
        parse('2\t0/0\n1\t0/0\n')

    assert e.value.line == '1\t0/0'
    assert e.value.lineno == 2
    assert e.value.tli == 1
    assert e.value.previous_tli == 2


def test_repeated_timeline():
    with pytest.raises(NonIncreasingTimeline):
        parse('1\t0/3000000\n1\t0/5000000\n')


def test_timeline_zero_rejected():
    with pytest.raises(NonIncreasingTimeline) as e:
        parse('0\t0/0\n')

    assert e.value.previous_tli == 0


def test_timeline_gaps_allowed():
    assert [e.tli for e in parse('1\t0/1\n5\t0/2\n6\t0/3\n')] == [1, 5, 6]


def test_parse_errors_share_a_base():
    for text in ('x', '1', '2\t0/0\n1\t0/0'):
        with pytest.raises(HistoryParseError):
            parse(text)


def test_history_file_name():
    assert history_file_name(1) == '00000001.history'
    assert history_file_name(0x1A) == '0000001A.history'
