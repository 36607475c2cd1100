"""
Crumbler command line.

Usage:
    # Create a project and run every stage
    crumbler -i article.html --all

    # Clean, lowercase and tag a directory of files in German
    crumbler -i corpus/ --clean --lowercase --pos --language DE

    # Continue working in an existing project
    crumbler --project output/article --ner
"""

import argparse
import logging
import queue
import sys
import threading
from typing import List, Optional

from .errors import CrumblerError
from .pipeline import Project, ProjectWorkspace, Stage, StageOrchestrator, StageRequest
from .utils.log import configure_logging

logger = logging.getLogger(__name__)

STAGE_FLAGS = {
    "clean": Stage.CLEAN,
    "normalize": Stage.NORMALIZE,
    "tokenize": Stage.TOKENIZE,
    "stopwords": Stage.STOPWORDS,
    "lemmatize": Stage.LEMMATIZE,
    "pos": Stage.TAG,
    "ner": Stage.NER,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crumbler",
        description="Crumbler text pre-processing pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "-i", "--input",
        type=str,
        help="File, directory or HTTP(S) URL to ingest into a new project"
    )
    input_group.add_argument(
        "--project",
        type=str,
        help="Existing project directory to continue processing"
    )

    parser.add_argument(
        "--name",
        type=str,
        help="Project name (default: derived from the input)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Parent directory for new projects (overrides CRUMBLER_OUTPUT_DIR)"
    )
    parser.add_argument(
        "--language",
        type=str.upper,
        choices=["EN", "DE"],
        default="EN",
        help="Language of the input (default: EN)"
    )

    # Stage selection
    stages = parser.add_argument_group("stages")
    stages.add_argument("--clean", action="store_true", help="Remove URLs, digits and special characters")
    stages.add_argument("--normalize", action="store_true", help="Strip sentence punctuation")
    stages.add_argument("--lowercase", action="store_true", help="Lowercase while normalizing")
    stages.add_argument("--contractions", action="store_true", help="Expand contractions while normalizing")
    stages.add_argument("--tokenize", action="store_true", help="Split into tokens")
    stages.add_argument("--stopwords", action="store_true", help="Remove stopwords")
    stages.add_argument("--lemmatize", action="store_true", help="Lemmatize tokens")
    stages.add_argument("--pos", action="store_true", help="Part-of-speech tagging")
    stages.add_argument("--ner", action="store_true", help="Named entity recognition")
    stages.add_argument("--all", action="store_true", help="Run every stage")

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging on the console"
    )
    return parser


def request_from_args(args: argparse.Namespace) -> StageRequest:
    """Turn stage flags into a StageRequest."""
    if args.all:
        selected = frozenset(Stage)
    else:
        selected = frozenset(stage for flag, stage in STAGE_FLAGS.items() if getattr(args, flag))
    return StageRequest(
        stages=selected,
        lowercase=args.lowercase,
        contractions=args.contractions,
        language=args.language
    )


def run_pipeline(args: argparse.Namespace, events: queue.Queue,
                 features: Optional[StageOrchestrator] = None) -> None:
    """
    Worker body: create or open the project, then run the requested stages.

    Every outcome is reported through ``events``; nothing is shared with
    the calling thread.
    """
    try:
        features = features or StageOrchestrator(
            workspace=ProjectWorkspace(output_directory=args.output_dir)
        )
        if args.project:
            project = features.workspace.open(args.project)
        else:
            project = features.newproject(args.input, args.name)
        events.put(("created", project))

        request = request_from_args(args)
        if request.stages:
            project = features.run(
                project,
                request,
                on_progress=lambda pct, label: events.put(("progress", pct, label))
            )
        events.put(("done", project))
    except CrumblerError as e:
        logger.error("Pipeline failed: %s", e)
        events.put(("error", e))
    except Exception as e:
        logger.exception("Unexpected pipeline failure")
        events.put(("error", e))


def print_summary(project: Project) -> None:
    """Print a human-readable end-of-run summary."""
    print("\n" + "=" * 50, file=sys.stderr)
    print("📊 Crumbler Summary", file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    print(f"📁 Project:   {project.directory}", file=sys.stderr)
    print(f"   Seeds:     {project.seed_file_count}", file=sys.stderr)
    print(f"   Processed: {project.stats.processed}", file=sys.stderr)
    print(f"   Failed:    {project.stats.failed}", file=sys.stderr)
    print(f"   Warnings:  {project.stats.warnings}", file=sys.stderr)
    for stage, paths in project.outputs.items():
        if paths:
            print(f"   {stage.value}: {len(paths)} file(s)", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_file = configure_logging(verbose=args.verbose)

    events: queue.Queue = queue.Queue()
    worker = threading.Thread(target=run_pipeline, args=(args, events), daemon=True)
    worker.start()

    project = None
    error = None
    while True:
        event = events.get()
        kind = event[0]
        if kind == "created":
            print(f"🔗 Project ready: {event[1].directory}", file=sys.stderr)
        elif kind == "progress":
            _, pct, label = event
            print(f"   [{pct:3d}%] {label}", file=sys.stderr)
        elif kind == "done":
            project = event[1]
            break
        elif kind == "error":
            error = event[1]
            break

    worker.join()

    if error is not None:
        print(f"Error: {error}", file=sys.stderr)
        print(f"See log: {log_file}", file=sys.stderr)
        return 1

    print_summary(project)
    return 0


if __name__ == "__main__":
    sys.exit(main())
