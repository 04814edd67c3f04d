"""releasenotes workflow integration using LangGraph for orchestration."""

import argparse
import sys
from typing import List, Optional

from langgraph.graph import END, StateGraph
from loguru import logger

from releasenotes.exceptions import ConfigurationError
from releasenotes.github.client import GitHubClient
from releasenotes.nodes.range_extractor import RepositorySource, load_commit_range_node
from releasenotes.nodes.release_notes_node import ReleaseNotesComposer, load_release_notes_composer
from releasenotes.settings import load_settings
from releasenotes.types.state import AgentState

RELEASE_NOTES_BANNER = "=== RELEASE NOTES ==="
CLOSING_RULE = "=" * len(RELEASE_NOTES_BANNER)


def _after_commit_range(state: AgentState) -> str:
    if state.get("errors"):
        return END
    return "release_notes_node"


def create_workflow(client: RepositorySource, composer: Optional[ReleaseNotesComposer] = None):
    """Create the workflow graph.

    Without a composer the graph stops after the commit range is extracted.
    """
    workflow = StateGraph(AgentState)

    workflow.add_node("commit_range_node", load_commit_range_node(client).run)
    workflow.set_entry_point("commit_range_node")

    if composer is None:
        workflow.add_edge("commit_range_node", END)
    else:
        workflow.add_node("release_notes_node", composer.run)
        workflow.add_conditional_edges("commit_range_node", _after_commit_range)
        workflow.add_edge("release_notes_node", END)

    return workflow.compile()


def run_workflow(
    client: RepositorySource,
    owner: str,
    repo: str,
    from_ref: str,
    to_ref: str,
    composer: Optional[ReleaseNotesComposer] = None,
    output_file: Optional[str] = None,
) -> AgentState:
    """Run the workflow and return the final state."""
    initial_state: AgentState = {
        "owner": owner,
        "repo": repo,
        "from_ref": from_ref,
        "to_ref": to_ref,
        "output_file": output_file,
        "errors": [],
    }
    app = create_workflow(client, composer)
    return app.invoke(initial_state)


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--owner", required=True, help="The owner of the repository")
    parser.add_argument("-r", "--repo", required=True, help="The name of the repository")
    parser.add_argument("-f", "--from", dest="from_ref", required=True, help="The starting commit ID or tag")
    parser.add_argument("-t", "--to", dest="to_ref", required=True, help="The ending commit ID or tag")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="releasenotes", description="Generate release notes from GitHub commits")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_commits = subparsers.add_parser(
        "list-commits", help="List commit messages between two commit IDs or tags"
    )
    _add_range_arguments(list_commits)

    generate = subparsers.add_parser(
        "generate-release-notes", help="Generate release notes for the commits between two commit IDs or tags"
    )
    _add_range_arguments(generate)
    generate.add_argument("--output-file", help="Save the raw commit and diff text to this file")

    return parser


def _report_errors(final_state: AgentState) -> None:
    logger.error("Errors encountered during processing:")
    for error in final_state["errors"]:
        logger.error(f"- {error['node']}: {error['error']}")
    sys.exit(1)


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    generate_notes = args.command == "generate-release-notes"
    try:
        settings = load_settings(require_completion=generate_notes)
        composer = None
        if generate_notes:
            composer = load_release_notes_composer(settings.groq_api_key, settings.model, settings.system_prompt_path)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    client = GitHubClient(settings.github_token)
    logger.info(f"Analyzing repository: {args.owner}/{args.repo}")
    final_state = run_workflow(
        client,
        args.owner,
        args.repo,
        args.from_ref,
        args.to_ref,
        composer=composer,
        output_file=getattr(args, "output_file", None),
    )

    if final_state.get("errors"):
        _report_errors(final_state)

    if generate_notes:
        print(RELEASE_NOTES_BANNER)
        print(final_state.get("release_notes", ""))
        print(CLOSING_RULE)
    else:
        for line in final_state.get("commit_lines", []):
            print(line)


if __name__ == "__main__":
    main()
