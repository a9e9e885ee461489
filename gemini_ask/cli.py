"""Interactive command line entry point."""
from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .builder import build_payload, clean_image_path
from .catalog import ModelCatalog, load_catalog, select_model
from .client import GeminiClient
from .config import AppSettings, load_env_file, load_system_instruction
from .exceptions import AskConfigError, AskValidationError
from .models import ApiResult, RunConfig
from .retry import RetryController, is_affirmative
from .writer import ResultWriter, open_in_viewer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

InputFn = Callable[[str], str]
ClientFactory = Callable[[AppSettings], GeminiClient]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemini-ask",
        description="Ask Gemini one question (optionally with an image) and save the answer to a file.",
    )
    parser.add_argument("--instruction-file", type=Path, help="system instruction file (default: the one shipped with the package)")
    parser.add_argument("--output", type=Path, help="where to write the answer (default: gemini_response.md)")
    parser.add_argument("--catalog", type=Path, help="YAML model catalog replacing the built-in one")
    parser.add_argument("--api-base", help="API base URL")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds (default: none)")
    parser.add_argument("--env-key", action="store_true", help="read the API key from GEMINI_API_KEY instead of prompting")
    parser.add_argument("--dry-run", action="store_true", help="print the request payload and exit without sending")
    parser.add_argument("--no-open", action="store_true", help="do not open the answer file afterwards")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    settings = AppSettings.from_env()
    if args.instruction_file is not None:
        settings.instruction_file = args.instruction_file
    if args.output is not None:
        settings.output_file = args.output
    if args.catalog is not None:
        settings.catalog_file = args.catalog
    if args.api_base:
        settings.api_base = args.api_base.rstrip("/")
    if args.timeout is not None:
        if args.timeout <= 0:
            raise AskConfigError("--timeout must be positive")
        settings.timeout = args.timeout
    return settings


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def format_catalog(catalog: ModelCatalog) -> str:
    lines = ["Available models:"]
    for idx, name in enumerate(catalog.models, start=1):
        marker = " (default)" if name == catalog.default else ""
        lines.append(f"  {idx}. {name}{marker}")
    return "\n".join(lines)


def _report_failure(model: str, result: ApiResult) -> None:
    _error(f"Request with {model} failed: {result.describe_failure()}")


def _make_confirm(input_func: InputFn, default_model: str) -> Callable[[str, ApiResult], bool]:
    def confirm(model: str, result: ApiResult) -> bool:
        answer = input_func(f"Retry with default model {default_model}? [y/N]: ")
        return is_affirmative(answer)

    return confirm


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    input_func: InputFn = input,
    secret_func: InputFn = getpass.getpass,
    client_factory: ClientFactory = GeminiClient.from_settings,
    open_func: Callable[[Path], bool] = open_in_viewer,
) -> int:
    """Run one question/answer cycle and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    load_env_file()

    try:
        settings = resolve_settings(args)
        system_instruction = load_system_instruction(settings.instruction_file)
        catalog = load_catalog(settings.catalog_file)
    except AskConfigError as exc:
        _error(str(exc))
        return EXIT_FAILURE

    if args.env_key:
        api_key = os.environ.get("GEMINI_API_KEY", "")
    else:
        api_key = secret_func("Gemini API key: ")
    api_key = (api_key or "").strip()
    if not api_key:
        _error("API key must not be empty")
        return EXIT_FAILURE

    print(format_catalog(catalog))
    selection = select_model(input_func(f"Model [number or name, Enter for {catalog.default}]: "), catalog)
    if selection.warning:
        _warn(selection.warning)
    print(f"Using model: {selection.model}")

    prompt_text = input_func("Question: ")
    image_path = clean_image_path(input_func("Image path (optional, Enter to skip): "))

    try:
        config = RunConfig(
            system_instruction=system_instruction,
            api_key=api_key,
            model=selection.model,
            prompt_text=prompt_text,
            image_path=image_path,
        )
    except AskValidationError as exc:
        _error(str(exc))
        return EXIT_FAILURE

    if args.dry_run:
        payload, warnings = build_payload(config.system_instruction, config.prompt_text, config.image_path)
        for message in warnings:
            _warn(message)
        print(json.dumps(
            {"model": config.model, "payload": payload.preview()},
            indent=2,
            ensure_ascii=False,
        ))
        return EXIT_OK

    warned: List[str] = []

    def send(model: str) -> ApiResult:
        result = client.send(model, config.system_instruction, config.prompt_text, config.image_path, config.api_key)
        for message in result.warnings:
            if message not in warned:
                warned.append(message)
                _warn(message)
        return result

    with client_factory(settings) as client:
        controller = RetryController(
            send=send,
            default_model=catalog.default,
            confirm=_make_confirm(input_func, catalog.default),
            on_failure=_report_failure,
        )
        outcome = controller.run(config.model)

    if not outcome.ok:
        if outcome.declined:
            _error("Retry declined")
        return EXIT_FAILURE

    written = ResultWriter(settings.output_file).write(outcome.result)
    if written is None:
        print("The response contained no text. Full response:")
        print(outcome.result.dump_body())
        return EXIT_OK

    print(f"Answer from {outcome.model} written to {written}")
    if not args.no_open:
        open_func(written)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        return run(argv)
    except (KeyboardInterrupt, EOFError):
        print(file=sys.stderr)
        _error("Aborted")
        return EXIT_FAILURE
    except OSError as exc:
        _error(str(exc))
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
