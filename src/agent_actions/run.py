# run.py
# Entry point. Config and wiring only — no logic lives here.
#
# Swap the model string for any OpenRouter-supported model via AGENT_MODEL.
# https://openrouter.ai/models

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from agent_actions.config import ConfigError, load_model, load_policy
from agent_actions.executor import Executor
from agent_actions.harness import AgentSession, run_message
from agent_actions.logging_utils import configure_logging
from agent_actions.models import ACTION_LIST_ADAPTER
from agent_actions.parser import parse_actions


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _executor_from_args(args: argparse.Namespace) -> Executor:
    policy = load_policy()
    if args.allow_exec:
        policy = policy.model_copy(update={"can_execute": True})
    return Executor(Path(args.cwd), policy)


def cmd_parse(args: argparse.Namespace) -> int:
    actions = parse_actions(_read_input(args.file))
    sys.stdout.write(ACTION_LIST_ADAPTER.dump_json(actions, indent=2).decode("utf-8") + "\n")
    return 0


def cmd_exec(args: argparse.Namespace) -> int:
    run_message(_read_input(args.file), _executor_from_args(args))
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    session = AgentSession(model=args.model or load_model(), executor=_executor_from_args(args))
    session.run(args.prompt)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="agent-actions")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("parse", help="Print the actions found in a message as JSON")
    sp.add_argument("file", nargs="?", help="Message file (default: stdin)")
    sp.set_defaults(func=cmd_parse)

    for name, help_text in (
        ("exec", "Parse a message and execute its actions"),
        ("ask", "Send a prompt to the model and execute its reply"),
    ):
        sp = sub.add_parser(name, help=help_text)
        if name == "exec":
            sp.add_argument("file", nargs="?", help="Message file (default: stdin)")
            sp.set_defaults(func=cmd_exec)
        else:
            sp.add_argument("prompt")
            sp.add_argument("--model", help="Model name (default: AGENT_MODEL or built-in)")
            sp.set_defaults(func=cmd_ask)
        sp.add_argument("--cwd", default=".", help="Working directory for actions (default: .)")
        sp.add_argument(
            "--allow-exec",
            action="store_true",
            help="Permit ExecuteCommand actions regardless of AGENT_CAN_EXECUTE",
        )

    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return int(args.func(args))
    except ConfigError as exc:
        sys.stderr.write(f"configuration error: {exc}\n")
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
