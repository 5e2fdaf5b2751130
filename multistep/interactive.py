#!/usr/bin/env python3
"""
multistep Interactive CLI

A command-line interface for asking questions that the model may answer by
calling tools over several rounds.
"""

import argparse
import json
import logging
import queue
import signal
import sys
import threading
from typing import Optional

import openai

from .config import config, configure_logging
from .llm_call import LLMClient
from .orchestration import (
    ChatProposer,
    CollectingEventSink,
    CompositeEventSink,
    EarlyFailure,
    Executed,
    FinalText,
    LoggingEventSink,
    OrchestrationLoop,
    Proposed,
    Resolved,
    Truncated,
)
from .tools import ToolRegistry, build_default_registry
from .worker import PromptWorker

_shutdown_requested = threading.Event()

# Ctrl+C is handled by _signal_handler, so waits poll the shutdown flag
ANSWER_POLL_SECONDS = 0.2
WORKER_STOP_SECONDS = 5.0

logger = logging.getLogger(__name__)


def _signal_handler(signum: int, frame) -> None:
    """Handle SIGINT for graceful shutdown."""
    if _shutdown_requested.is_set():
        logger.debug("Force shutdown requested")
        sys.exit(1)
    logger.debug("Shutdown requested")
    _shutdown_requested.set()
    print("\n\nShutting down... (press Ctrl+C again to force)")


def print_banner() -> None:
    """Print the welcome banner."""
    banner = """
╔════════════════════════════════════════════════════════════════╗
║                     multistep Interactive                       ║
║                                                                 ║
║  Bounded multi-step tool calling over an OpenAI endpoint        ║
╚════════════════════════════════════════════════════════════════╝

Available commands:
  /help     - Show this help message
  /trace    - Show the event trace of the last query
  /tools    - List available tools
  /verbose  - Toggle verbose mode
  /quit     - Exit the CLI

Type your questions or tasks below.
"""
    print(banner)


def print_tools(registry: ToolRegistry) -> None:
    print("\nAvailable Tools:")
    print("─" * 64)
    for i, tool in enumerate(registry, start=1):
        print(f"{i}. {tool.name.ljust(18)} - {tool.description}")
    print()


def print_trace(sink: CollectingEventSink) -> None:
    """Print the events recorded for the last run."""
    if not len(sink):
        print("\nNo trace available. Run a query first.\n")
        return

    print("\n" + "═" * 70)
    print("ORCHESTRATION TRACE")
    print("═" * 70)
    for event in sink:
        if isinstance(event, Proposed):
            print(f"\n┌─ Iteration {event.iteration}")
            print(f"│  Proposed: {event.decision}")
        elif isinstance(event, Resolved):
            text = event.resolution.describe()
            if len(text) > 200:
                text = text[:200] + "..."
            marker = "Result" if isinstance(event.resolution, Executed) else "Failed"
            print(f"│  {marker}: {text}")
        elif isinstance(event, FinalText):
            print(f"│  Final answer ({len(event.text)} chars)")
            print("└" + "─" * 68)
        elif isinstance(event, EarlyFailure):
            print("│  [EARLY FAILURE]")
            print("└" + "─" * 68)
        elif isinstance(event, Truncated):
            print(f"\n[TRUNCATED after {event.max_iterations} iterations]")
    print()


def build_loop(
    max_iterations: Optional[int] = None,
    event_sink=None,
    registry: Optional[ToolRegistry] = None,
) -> OrchestrationLoop:
    """Wire the configured endpoint, tool catalog and sinks into a loop."""
    model_config = config.model
    registry = registry if registry is not None else build_default_registry(config.tools)
    proposer = ChatProposer(LLMClient(model_config), model_config)
    return OrchestrationLoop(
        proposer,
        registry,
        max_iterations=max_iterations or model_config.max_iterations,
        event_sink=event_sink,
        system_directive=model_config.system_prompt,
    )


class InteractiveCLI:
    """REPL that hands prompts to a background ``PromptWorker``."""

    def __init__(self, max_iterations: Optional[int] = None, verbose: bool = False):
        self.verbose = verbose
        self.trace_sink = CollectingEventSink()
        self.loop = build_loop(
            max_iterations=max_iterations,
            event_sink=CompositeEventSink([LoggingEventSink(), self.trace_sink]),
        )
        self.worker = PromptWorker(self.loop)

    def toggle_verbose(self) -> None:
        self.verbose = not self.verbose
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.getLogger("multistep").setLevel(level)
        print(f"\nVerbose mode: {'ON' if self.verbose else 'OFF'}\n")

    def process_query(self, query: str) -> bool:
        """Process a user query.

        Returns:
            True if should continue, False if shutdown requested
        """
        print("\n" + "─" * 70)
        print("Processing query...")
        print("─" * 70 + "\n")

        self.trace_sink.clear()
        self.worker.submit(query)
        answer = self._wait_for_answer()
        if answer is None:
            print("\n\nQuery interrupted, shutting down.\n")
            return False

        print("\n" + "═" * 70)
        print("ANSWER")
        print("═" * 70)
        print(answer)
        print("═" * 70 + "\n")

        result = self.worker.last_result
        if result is not None:
            suffix = " (truncated)" if result.truncated else ""
            plural = "s" if result.iterations != 1 else ""
            print(f"(Completed in {result.iterations} iteration{plural}{suffix})")
        print("Use /trace to see the full event trace.\n")
        return True

    def _wait_for_answer(self) -> Optional[str]:
        """Next answer from the worker, or None once shutdown is requested."""
        while not _shutdown_requested.is_set():
            try:
                return self.worker.get_answer(timeout=ANSWER_POLL_SECONDS)
            except queue.Empty:
                continue
        return None

    def run(self) -> None:
        """Run the interactive CLI loop."""
        print_banner()
        self.worker.start()
        try:
            self._repl()
        finally:
            self.worker.stop(timeout=WORKER_STOP_SECONDS)

    def _repl(self) -> None:
        while not _shutdown_requested.is_set():
            try:
                user_input = input(">>> ").strip()
                if _shutdown_requested.is_set():
                    break
                if not user_input:
                    continue

                if user_input.startswith("/"):
                    command = user_input.lower()
                    if command in ("/quit", "/exit", "/q"):
                        print("\nGoodbye!\n")
                        break
                    elif command in ("/help", "/h", "/?"):
                        print_banner()
                    elif command == "/trace":
                        print_trace(self.trace_sink)
                    elif command == "/tools":
                        print_tools(self.loop.registry)
                    elif command == "/verbose":
                        self.toggle_verbose()
                    else:
                        print(f"\nUnknown command: {user_input}")
                        print("Type /help for available commands.\n")
                elif not self.process_query(user_input):
                    break

            except KeyboardInterrupt:
                if _shutdown_requested.is_set():
                    print("\n")
                    break
                print("\n\nType /quit to exit.\n")
            except EOFError:
                print("\nGoodbye!\n")
                break


def run_single_query(query: str, max_iterations: Optional[int], as_json: bool) -> int:
    """Answer one query on the calling thread and print it. Returns an exit code."""
    trace_sink = CollectingEventSink()
    loop = build_loop(
        max_iterations=max_iterations,
        event_sink=CompositeEventSink([LoggingEventSink(), trace_sink]),
    )
    try:
        result = loop.run_blocking(query)
    except openai.APIError as e:
        print(f"API error: {e}", file=sys.stderr)
        return 1

    if as_json:
        output = {
            "query": query,
            "answer": result.final_answer,
            "iterations": result.iterations,
            "truncated": result.truncated,
            "steps": [step.describe() for step in result.steps],
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(result.final_answer)
    return 0


def main() -> None:
    """Main entry point."""
    signal.signal(signal.SIGINT, _signal_handler)

    parser = argparse.ArgumentParser(
        description="multistep Interactive CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                       # Start interactive mode
  %(prog)s -v                    # Start with verbose logging
  %(prog)s -q "What is X + Y?"   # Run a single query
  %(prog)s --max-iterations 3    # Allow at most 3 tool rounds

Use /tools in interactive mode to see available tools.
""",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-q",
        "--query",
        type=str,
        help="Run a single query and exit",
    )
    parser.add_argument(
        "-n",
        "--max-iterations",
        type=int,
        default=None,
        help=f"Maximum tool rounds per query (default: {config.model.max_iterations})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output single-query results as JSON (for scripting)",
    )

    args = parser.parse_args()
    if args.max_iterations is not None and args.max_iterations < 1:
        parser.error("--max-iterations must be at least 1")

    configure_logging("DEBUG" if args.verbose else None)

    if args.query:
        sys.exit(run_single_query(args.query, args.max_iterations, args.json))

    cli = InteractiveCLI(max_iterations=args.max_iterations, verbose=args.verbose)
    cli.run()


if __name__ == "__main__":
    main()
