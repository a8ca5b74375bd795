from wal_lineage.history import parse_history
from wal_lineage.segment_list import build_segment_list

__all__ = ['parse_history', 'build_segment_list']
