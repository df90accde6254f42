import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv
from loguru import logger

from cline_cli.app_config import load_json_config, parse_app_config
from cline_cli.bootstrap import RuntimeOptions, bootstrap_runtime
from cline_cli.chat import InteractiveChat
from cline_cli.configure import configure_settings
from cline_cli.logging_config import setup_logging
from cline_cli.state import StateStore

VERSION = "3.17.12"


def _add_runtime_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-d", "--directory", default=os.getcwd(), help="Working directory")
    parser.add_argument("-c", "--config", dest="config_path", help="Path to configuration file")
    parser.add_argument("--api-key", help="API key for the AI service")
    parser.add_argument("--model", help="AI model to use")
    parser.add_argument("--provider", help="AI provider (anthropic, openai-native, siliconflow, ollama, ...)")
    parser.add_argument("--base-url", help="Override the provider endpoint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cline", description="Cline - AI coding assistant for the command line")
    parser.add_argument("--version", action="version", version=VERSION)
    subparsers = parser.add_subparsers(dest="command")

    chat = subparsers.add_parser("chat", help="Start an interactive chat session")
    _add_runtime_options(chat)

    task = subparsers.add_parser("task", help="Execute a single task")
    task.add_argument("description")
    _add_runtime_options(task)

    subparsers.add_parser("config", help="Configure Cline settings")

    return parser


def _runtime_options(args: argparse.Namespace) -> RuntimeOptions:
    return RuntimeOptions(
        directory=args.directory,
        config_path=args.config_path,
        api_key=args.api_key,
        model=args.model,
        provider=args.provider,
        base_url=args.base_url,
    )


def _handle_missing_configuration(directory: str) -> None:
    print("No API configuration found. Please configure Cline first.")
    configure_settings(StateStore(directory))


async def _start_interactive_chat(args: argparse.Namespace) -> None:
    print("Starting Cline interactive chat...")
    runtime = bootstrap_runtime(_runtime_options(args))
    if runtime is None:
        _handle_missing_configuration(args.directory)
        return

    print(f"Working directory: {runtime.working_directory}")
    print(f"Using model: {runtime.agent.get_model().id or 'default'}")
    print("Type 'exit' or 'quit' to end the session\n")

    await InteractiveChat(runtime).start()


async def _execute_task(args: argparse.Namespace) -> None:
    print(f"Executing task: {args.description}")
    runtime = bootstrap_runtime(_runtime_options(args))
    if runtime is None:
        _handle_missing_configuration(args.directory)
        return

    runtime.printer.begin()
    try:
        await runtime.agent.execute_task(args.description)
    except Exception:
        print("Task failed", file=sys.stderr)
        raise
    finally:
        runtime.printer.end()
        runtime.agent.close()
    print("Task completed successfully!")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    app = parse_app_config(load_json_config())
    setup_logging(level=app.log_level, consumers=app.log_consumers)

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "chat":
            asyncio.run(_start_interactive_chat(args))
        elif args.command == "task":
            asyncio.run(_execute_task(args))
        elif args.command == "config":
            configure_settings(StateStore(os.getcwd()))
    except (EOFError, KeyboardInterrupt):
        print()
        return 130
    except Exception as ex:
        logger.opt(exception=ex).debug("Command failed")
        print(f"Error: {ex}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
