"""
Command line entry point for the course graph pipeline.

Actions:
    fetch     download the catalog and store the condensed course list
    parse     parse requirement text into records via the oracle
    validate  re-check every stored record against the schema
    links     assemble the graph and write nodes.csv / links.csv
    stats     report parse coverage
"""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from coursegraph.clients import CatalogClient, OracleClient
from coursegraph.config import FileNames, PipelineSettings
from coursegraph.core.exceptions import CourseGraphError
from coursegraph.core.progress_tracker import ProgressTracker
from coursegraph.handlers import GraphAssembler, validate_course_record
from coursegraph.models import CourseGraph, CourseInfo
from coursegraph.pipeline import ParsePipeline
from coursegraph.statistics import report
from coursegraph.storage import JsonRecordStore, write_graph_csv
from coursegraph.utils import setup_logging

logger = logging.getLogger("coursegraph")

ACTIONS = ["fetch", "parse", "validate", "links", "stats"]


def fetch_catalog(settings: PipelineSettings, store: JsonRecordStore) -> bool:
    client = CatalogClient(url=settings.catalog_url, timeout=settings.request_timeout)
    payload = client.fetch_outlines()
    store.save_raw_outlines(payload)
    store.save_catalog(client.condense(payload))
    return True


def _select_courses(courses: List[CourseInfo], course_id: Optional[str]) -> List[CourseInfo]:
    if not course_id:
        return courses
    wanted = " ".join(course_id.upper().split())
    selected = [course for course in courses if course.course_id.upper() == wanted]
    if not selected:
        logger.error(f"Course {course_id} is not in the catalog")
    return selected


def parse_requirements(settings: PipelineSettings, store: JsonRecordStore,
                       course_id: Optional[str] = None, limit: Optional[int] = None) -> bool:
    courses = _select_courses(store.load_catalog(), course_id)
    if not courses:
        return False

    oracle = OracleClient.from_settings(settings)
    pipeline = ParsePipeline(oracle, store, schema_version=settings.schema_version)
    task = pipeline.run(courses, limit=limit)

    for name, count in task.summary().items():
        logger.info(f"  {name}: {count}")
    return True


def validate_records(store: JsonRecordStore) -> bool:
    entries = store.load_raw_records()
    invalid = 0
    for index, entry in enumerate(entries):
        result = validate_course_record(entry)
        if result.is_valid:
            continue
        invalid += 1
        label = f"{entry.get('department')} {entry.get('number')}" if isinstance(entry, dict) else f"[{index}]"
        logger.error(f"{label}: {len(result.errors)} error(s)")
        for error in result.errors:
            logger.error(f"    {error}")

    logger.info(f"Validated {len(entries)} records: {len(entries) - invalid} valid, {invalid} invalid")
    return invalid == 0


def log_graph_summary(graph: CourseGraph, top: int = 10) -> None:
    logger.info(f"Graph: {len(graph.nodes)} nodes, {len(graph.links)} links")

    logger.info("Nodes per department:")
    for group, count in sorted(graph.department_counts().items(), key=lambda item: (-item[1], item[0])):
        logger.info(f"  {group}: {count}")

    logger.info(f"Top {top} courses by number of dependents:")
    ranked = sorted(graph.out_degrees().items(), key=lambda item: (-item[1], item[0]))[:top]
    for node_id, degree in ranked:
        logger.info(f"  {node_id}: {degree} dependents (size {graph.node(node_id).size})")

    logger.info("Depth distribution:")
    for depth, count in graph.depth_distribution().items():
        logger.info(f"  depth {depth}: {count} courses")

    logger.info("Deepest courses:")
    for node in graph.deepest(5):
        logger.info(f"  {node.id} ({node.title}): depth {node.depth}")


def build_links(settings: PipelineSettings, store: JsonRecordStore, prune: bool = True) -> bool:
    records = store.load_records()
    if not records:
        logger.error("No parsed records found; run the parse action first")
        return False

    tracker = ProgressTracker()
    tracker.start_task("build_graph", len(records))
    try:
        graph = GraphAssembler(prune=prune).assemble(records)
        write_graph_csv(
            graph,
            settings.data_dir / FileNames.NODES_CSV,
            settings.data_dir / FileNames.LINKS_CSV,
        )
    except CourseGraphError as e:
        tracker.fail_task(str(e))
        raise
    tracker.update_progress(len(records))
    tracker.complete_task(f"{len(graph.nodes)} nodes, {len(graph.links)} links")
    log_graph_summary(graph)
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Course requirement parsing and dependency graph builder")
    parser.add_argument("action", choices=ACTIONS, help="Action to perform")
    parser.add_argument("--course", help='Only parse this course, e.g. "CMPT 225" (parse action)')
    parser.add_argument("--limit", type=int, help="Stop after this many oracle-backed parses (parse action)")
    parser.add_argument("--keep-isolated", action="store_true",
                        help="Keep nodes without links in the graph (links action)")
    parser.add_argument("--log-file", help="Also write log output to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main function to run the course graph pipeline."""
    args = build_parser().parse_args(argv)

    # Load environment variables
    load_dotenv()

    debug = False
    try:
        settings = PipelineSettings.from_env()
        debug = settings.debug
        setup_logging(logging.DEBUG if debug else logging.INFO, log_file=args.log_file)
        store = JsonRecordStore(settings.data_dir)

        if args.action == "fetch":
            success = fetch_catalog(settings, store)
        elif args.action == "parse":
            success = parse_requirements(settings, store, args.course, args.limit)
        elif args.action == "validate":
            success = validate_records(store)
        elif args.action == "links":
            success = build_links(settings, store, prune=not args.keep_isolated)
        else:
            report(store)
            success = True

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(130)

    except CourseGraphError as e:
        logger.error(f"{args.action} failed: {e}", exc_info=debug)
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
