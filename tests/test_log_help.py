import logging

import wal_lineage.log_help as log_help


def test_nonexisting_socket(tmpdir):
    # Must not raise an exception, silently failing is preferred for
    # now.
    log_help.configure(syslog_address=tmpdir.join('bogus'))


def test_format_structured_info():
    zero = {}, ''
    one = {'hello': 'world'}, 'hello=world'
    many = {'hello': 'world', 'goodbye': 'world'}, 'hello=world goodbye=world'

    for d, expect in [zero, one, many]:
        assert log_help.WalLineageLogger._fmt_structured(d) == expect


def test_fmt_logline_simple():
    out = log_help.WalLineageLogger.fmt_logline(
        'The message', 'The detail', 'The hint', {'structured-data': 'yes'})
    assert out == """MSG: The message
DETAIL: The detail
HINT: The hint
STRUCTURED: structured-data=yes"""

    # Try without structured data
    out = log_help.WalLineageLogger.fmt_logline(
        'The message', 'The detail', 'The hint')
    assert out == """MSG: The message
DETAIL: The detail
HINT: The hint"""


def test_fmt_logline_message_only():
    assert log_help.WalLineageLogger.fmt_logline('alone') == 'MSG: alone'


def test_log_passes_through_level(caplog):
    logger = log_help.WalLineageLogger('wal_lineage.test')

    with caplog.at_level(logging.DEBUG, logger='wal_lineage.test'):
        logger.warning(msg='careful', hint='look here',
                       structured={'segments': 3})

    record, = caplog.records
    assert record.levelno == logging.WARNING
    assert record.getMessage() == ('MSG: careful\n'
                                   'HINT: look here\n'
                                   'STRUCTURED: segments=3')


def test_configure_indents_continuation_lines(tmpdir):
    out = tmpdir.join('log.txt')

    with open(str(out), 'w') as stream:
        log_help.configure(stream=stream)
        log_help.WalLineageLogger('wal_lineage.test').info(
            msg='first', detail='second')
        for handler in log_help.HANDLERS:
            handler.flush()

    lines = out.read().splitlines()
    assert lines[0].startswith('wal-lineage INFO ')
    assert lines[0].endswith('MSG: first')
    assert lines[1] == '        DETAIL: second'
