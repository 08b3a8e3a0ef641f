"""
Tabular export of the course graph.

The node table has columns ``id,title,group,size,depth`` and the link table
``source,target,value``; both are written as CSV for graph visualization
tools and can be read back into a CourseGraph.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import pandas as pd

from ..core.exceptions import RecordDecodeError, StorageError
from ..models.graph import CourseGraph, GraphLink, GraphNode

logger = logging.getLogger(__name__)

NODE_COLUMNS = ["id", "title", "group", "size", "depth"]
LINK_COLUMNS = ["source", "target", "value"]

_NODE_DTYPES = {"id": str, "title": str, "group": str, "size": float, "depth": int}
_LINK_DTYPES = {"source": str, "target": str, "value": float}


def graph_to_frames(graph: CourseGraph) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Convert a graph into (nodes, links) DataFrames with fixed column order."""
    nodes = pd.DataFrame([node.to_dict() for node in graph.nodes], columns=NODE_COLUMNS)
    links = pd.DataFrame([link.to_dict() for link in graph.links], columns=LINK_COLUMNS)
    return nodes, links


def frames_to_graph(nodes: pd.DataFrame, links: pd.DataFrame) -> CourseGraph:
    """Rebuild a graph from node and link DataFrames."""
    return CourseGraph(
        nodes=[
            GraphNode(
                id=row.id,
                title=row.title,
                group=row.group,
                size=float(row.size),
                depth=int(row.depth),
            )
            for row in nodes.itertuples(index=False)
        ],
        links=[
            GraphLink(source=row.source, target=row.target, value=float(row.value))
            for row in links.itertuples(index=False)
        ],
    )


def write_graph_csv(graph: CourseGraph, nodes_path: Union[str, Path], links_path: Union[str, Path]) -> None:
    """Write the node and link tables as CSV files."""
    nodes, links = graph_to_frames(graph)
    try:
        Path(nodes_path).parent.mkdir(parents=True, exist_ok=True)
        Path(links_path).parent.mkdir(parents=True, exist_ok=True)
        nodes.to_csv(nodes_path, index=False)
        links.to_csv(links_path, index=False)
    except OSError as e:
        raise StorageError(f"Could not write graph CSV: {e}") from e
    logger.info(f"Nodes saved to: {nodes_path}")
    logger.info(f"Links saved to: {links_path}")


def read_graph_csv(nodes_path: Union[str, Path], links_path: Union[str, Path]) -> CourseGraph:
    """Read node and link CSV files written by ``write_graph_csv``."""
    try:
        # keep_default_na stops titles like "NA" from turning into NaN
        nodes = pd.read_csv(nodes_path, dtype=_NODE_DTYPES, keep_default_na=False)
        links = pd.read_csv(links_path, dtype=_LINK_DTYPES, keep_default_na=False)
    except FileNotFoundError as e:
        raise StorageError(f"Graph CSV not found: {e}") from e
    except (ValueError, pd.errors.ParserError) as e:
        raise RecordDecodeError(f"Graph CSV is malformed: {e}") from e

    missing = [c for c in NODE_COLUMNS if c not in nodes.columns]
    missing += [c for c in LINK_COLUMNS if c not in links.columns]
    if missing:
        raise RecordDecodeError(f"Graph CSV is missing columns: {', '.join(missing)}")

    return frames_to_graph(nodes[NODE_COLUMNS], links[LINK_COLUMNS])
