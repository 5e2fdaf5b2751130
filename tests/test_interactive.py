"""Tests for the command-line entry points."""

import json
import threading
import time
from unittest.mock import patch

import httpx
import openai
import pytest

from multistep import interactive
from multistep.interactive import InteractiveCLI, print_tools, print_trace, run_single_query
from multistep.orchestration import (
    CollectingEventSink,
    OrchestrationLoop,
    TextDecision,
    ToolCallDecision,
)


def _patched_build_loop(proposer, registry):
    def _build(max_iterations=None, event_sink=None):
        return OrchestrationLoop(
            proposer, registry, max_iterations=max_iterations or 5, event_sink=event_sink
        )

    return patch("multistep.interactive.build_loop", side_effect=_build)


class TestRunSingleQuery:
    """Tests for run_single_query (the -q flag)."""

    def test_plain_output(self, scripted_proposer, constants_registry, capsys):
        proposer = scripted_proposer([TextDecision("Hello there")])

        with _patched_build_loop(proposer, constants_registry):
            code = run_single_query("hi", None, as_json=False)

        assert code == 0
        assert capsys.readouterr().out.strip() == "Hello there"

    def test_json_output(self, scripted_proposer, constants_registry, capsys):
        proposer = scripted_proposer(
            [ToolCallDecision("get_constants", "{}"), TextDecision("X is 10")]
        )

        with _patched_build_loop(proposer, constants_registry):
            code = run_single_query("What is X?", 3, as_json=True)

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["query"] == "What is X?"
        assert output["answer"] == "X is 10"
        assert output["iterations"] == 2
        assert output["truncated"] is False
        assert len(output["steps"]) == 1

    def test_endpoint_error_exit_code(self, scripted_proposer, constants_registry, capsys):
        request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
        proposer = scripted_proposer([openai.APIConnectionError(request=request)])

        with _patched_build_loop(proposer, constants_registry):
            code = run_single_query("q", None, as_json=False)

        assert code == 1
        assert "API error" in capsys.readouterr().err


class TestPrinters:
    """Tests for the REPL display helpers."""

    def test_print_tools(self, constants_registry, capsys):
        print_tools(constants_registry)
        assert "get_constants" in capsys.readouterr().out

    def test_print_empty_trace(self, capsys):
        print_trace(CollectingEventSink())
        assert "No trace available" in capsys.readouterr().out

    def test_print_trace(self, scripted_proposer, constants_registry, capsys):
        sink = CollectingEventSink()
        proposer = scripted_proposer([ToolCallDecision("get_constants", "{}"), TextDecision("done")])
        OrchestrationLoop(proposer, constants_registry, event_sink=sink).run_blocking("q")

        print_trace(sink)

        out = capsys.readouterr().out
        assert "Iteration 1" in out
        assert "Iteration 2" in out
        assert "get_constants" in out
        assert "Final answer" in out


@pytest.fixture
def shutdown_flag():
    """The module-level shutdown flag, cleared before and after each test."""
    interactive._shutdown_requested.clear()
    yield interactive._shutdown_requested
    interactive._shutdown_requested.clear()


class TestInteractiveCLI:
    """Tests for InteractiveCLI.process_query."""

    def test_answer_is_printed(self, scripted_proposer, constants_registry, shutdown_flag, capsys):
        proposer = scripted_proposer([TextDecision("forty-two")])
        with _patched_build_loop(proposer, constants_registry):
            cli = InteractiveCLI()
        cli.worker.start()
        try:
            assert cli.process_query("q") is True
        finally:
            cli.worker.stop(timeout=5)

        out = capsys.readouterr().out
        assert "forty-two" in out
        assert "Completed in 1 iteration)" in out

    def test_shutdown_interrupts_wait(self, scripted_proposer, constants_registry, shutdown_flag):
        """A shutdown request ends the wait without an answer."""
        with _patched_build_loop(scripted_proposer([]), constants_registry):
            cli = InteractiveCLI()
        # Worker never started, so no answer ever arrives
        threading.Timer(0.3, shutdown_flag.set).start()

        started = time.perf_counter()
        assert cli.process_query("q") is False
        assert time.perf_counter() - started < 2.0
