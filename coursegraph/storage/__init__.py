"""Persistence: JSON record store and CSV graph export."""

from .json_store import JsonRecordStore, debug_file_name
from .csv_export import (
    NODE_COLUMNS, LINK_COLUMNS, graph_to_frames, frames_to_graph, write_graph_csv, read_graph_csv
)

__all__ = [
    'JsonRecordStore', 'debug_file_name',
    'NODE_COLUMNS', 'LINK_COLUMNS', 'graph_to_frames', 'frames_to_graph',
    'write_graph_csv', 'read_graph_csv'
]
