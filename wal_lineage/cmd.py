#!/usr/bin/env python
"""
wal-lineage command line

Reads a timeline history file and either shows its entries or lists
the WAL segments a standby needs to travel from one (timeline, LSN) to
another.

"""
import argparse
import logging
import os
import sys

from wal_lineage import log_help
from wal_lineage.exception import UserException
from wal_lineage.history import history_file_name
from wal_lineage.history import parse_history
from wal_lineage.lsn import DEFAULT_SEGMENT_SIZE
from wal_lineage.lsn import check_segment_size
from wal_lineage.lsn import format_lsn
from wal_lineage.lsn import parse_lsn
from wal_lineage.segment_list import build_segment_list

logger = log_help.WalLineageLogger(__name__)

SEGMENT_SIZE_ENV = 'WAL_LINEAGE_SEGMENT_SIZE'
SYSLOG_ADDRESS_ENV = 'WAL_LINEAGE_SYSLOG_ADDRESS'


def segment_size_type(text):
    try:
        size = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(
            'segment size must be an integer, got {0!r}'.format(text))

    try:
        return check_segment_size(size)
    except UserException as e:
        raise argparse.ArgumentTypeError(e.detail)


def lsn_type(text):
    try:
        return parse_lsn(text)
    except UserException as e:
        raise argparse.ArgumentTypeError(e.detail)


def timeline_type(text):
    try:
        tli = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            'timeline must be a decimal number, got {0!r}'.format(text))

    if not 0 < tli <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(
            'timeline {0} is out of range'.format(tli))

    return tli


def build_parser():
    parser = argparse.ArgumentParser(
        prog='wal-lineage',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=__doc__)

    parser.add_argument('--segment-size', type=segment_size_type,
                        help='WAL segment size in bytes, a power of two.  '
                        'Can also be defined via environment variable '
                        '{0}.  Default: {1}.'.format(SEGMENT_SIZE_ENV,
                                                     DEFAULT_SEGMENT_SIZE))
    parser.add_argument('--syslog-address',
                        help='Also log to the syslog socket at this path.  '
                        'Can also be defined via environment variable '
                        '{0}.'.format(SYSLOG_ADDRESS_ENV))
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log debugging information.')

    subparsers = parser.add_subparsers(title='subcommands',
                                       dest='subcommand')
    subparsers.required = True

    history_parser = subparsers.add_parser(
        'parse-history', help='show the entries of a history file')
    history_parser.add_argument('history_file',
                                help="Timeline history file, or '-' for "
                                'standard input.')

    segment_parser = subparsers.add_parser(
        'segment-list',
        help='list the WAL segments leading from an origin to a target')
    segment_parser.add_argument('origin_tli', type=timeline_type)
    segment_parser.add_argument('origin_lsn', type=lsn_type)
    segment_parser.add_argument('target_tli', type=timeline_type)
    segment_parser.add_argument('target_lsn', type=lsn_type)
    segment_parser.add_argument('history_file',
                                help='History file of the target timeline, '
                                "or '-' for standard input.")

    return parser


def resolve_segment_size(args, environ):
    if args.segment_size is not None:
        return args.segment_size

    from_env = environ.get(SEGMENT_SIZE_ENV)
    if from_env:
        try:
            return segment_size_type(from_env)
        except argparse.ArgumentTypeError as e:
            raise UserException(
                msg='bad {0} environment variable'.format(SEGMENT_SIZE_ENV),
                detail=str(e))

    return DEFAULT_SEGMENT_SIZE


def read_history(path, stdin):
    if path == '-':
        return stdin.read()

    try:
        with open(path) as f:
            return f.read()
    except EnvironmentError as e:
        raise UserException(
            msg='could not read history file',
            detail='{0}: {1}'.format(path, e.strerror or e))


def check_history_file_name(path, target_tli):
    """
    Warn when a history file is named for another timeline than the target

    The history of the target timeline is the one that describes its
    ancestry; any other is accepted, but is probably a mistake.
    """
    name = os.path.basename(path)
    expected = history_file_name(target_tli)

    if name.endswith('.history') and name.upper() != expected.upper():
        logger.warning(
            msg='history file does not belong to the target timeline',
            detail='The history of timeline {0} is {1}, not {2}.'.format(
                target_tli, expected, name),
            hint='Pass the history file of the target timeline.')


def _fmt_optional_lsn(lsn):
    if lsn is None:
        return ''

    return format_lsn(lsn)


def run(args, environ, stdin, stdout):
    history_text = read_history(args.history_file, stdin)

    if args.subcommand == 'parse-history':
        for row in parse_history(history_text):
            stdout.write('{0}\t{1}\t{2}\n'.format(
                row.timeline,
                _fmt_optional_lsn(row.begin),
                _fmt_optional_lsn(row.end)))
    elif args.subcommand == 'segment-list':
        segment_size = resolve_segment_size(args, environ)

        if args.history_file != '-':
            check_history_file_name(args.history_file, args.target_tli)

        for name in build_segment_list(args.origin_tli, args.origin_lsn,
                                       args.target_tli, args.target_lsn,
                                       history_text,
                                       segment_size=segment_size):
            stdout.write(name + '\n')
    else:
        raise UserException(
            msg='unrecognized subcommand',
            detail='The subcommand {0!r} is not known.'
            .format(args.subcommand))


def main(argv=None, environ=None, stdin=None, stdout=None):
    environ = os.environ if environ is None else environ
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    args = build_parser().parse_args(argv)

    log_help.configure(
        syslog_address=(args.syslog_address or
                        environ.get(SYSLOG_ADDRESS_ENV) or None),
        level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(args, environ, stdin, stdout)
    except UserException as e:
        logger.log(level=e.severity,
                   msg=e.msg,
                   detail=e.detail,
                   hint=e.hint)
        sys.exit(1)


if __name__ == '__main__':
    main()
