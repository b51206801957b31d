"""
Command-line interface for LexiTax.

Usage:
    lexitax serve --port 8000
    lexitax signup --email abebe@example.com --name "Abebe Kebede"
    lexitax login --email abebe@example.com
    lexitax ask "What are the corporate tax rates in Ethiopia?"
    lexitax chat --api
    lexitax logout
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

from lexitax.api.exceptions import (
    AuthError,
    FetchError,
    GuestQuotaExceededError,
    LexiTaxError,
    NetworkError,
    ValidationError,
)
from lexitax.api.results import ApiResult
from lexitax.chat.state import ChatSession
from lexitax.config import LexiTaxSettings, set_settings
from lexitax.dependencies import get_auth_gateway, get_chat_session, get_session_manager
from lexitax.utils.logger import logger

DEFAULT_TOKEN_FILE = Path.home() / ".lexitax" / "credentials.json"


def describe_error(error: LexiTaxError | None) -> str:
    """One line telling the failure kinds apart."""
    if error is None:
        return "Unknown error"
    if isinstance(error, GuestQuotaExceededError):
        return error.message
    if isinstance(error, ValidationError):
        return f"Invalid input: {error.message}"
    if isinstance(error, NetworkError):
        return f"Network error: {error.message}"
    if isinstance(error, AuthError):
        return f"Authentication failed: {error}"
    if isinstance(error, FetchError):
        return f"Request failed: {error}"
    return str(error)


def build_settings(args: argparse.Namespace) -> LexiTaxSettings:
    overrides: dict = {"token_store_path": str(args.token_file)}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.api:
        overrides["use_mock_responses"] = False
    settings = LexiTaxSettings(**overrides)
    set_settings(settings)
    logger.set_level(args.log_level or settings.log_level)
    return settings


def _report(result: ApiResult, success_message: str) -> int:
    if result.success:
        print(success_message)
        return 0
    print(describe_error(result.error), file=sys.stderr)
    return 1


async def run_signup(args: argparse.Namespace, settings: LexiTaxSettings) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")
    async with get_auth_gateway(get_session_manager(settings), settings) as gateway:
        result = await gateway.signup(args.email, password, args.name, confirm_password=confirm)
    name = result.data.full_name if result.success else ""
    return _report(result, f"Welcome, {name}.")


async def run_login(args: argparse.Namespace, settings: LexiTaxSettings) -> int:
    password = args.password or getpass.getpass("Password: ")
    async with get_auth_gateway(get_session_manager(settings), settings) as gateway:
        result = await gateway.login(args.email, password)
    return _report(result, "Signed in.")


async def run_logout(args: argparse.Namespace, settings: LexiTaxSettings) -> int:
    async with get_auth_gateway(get_session_manager(settings), settings) as gateway:
        result = await gateway.logout()
    if not result.success:
        print(f"Signed out locally. {describe_error(result.error)}", file=sys.stderr)
        return 0
    print("Signed out.")
    return 0


def print_answer(result: ApiResult) -> None:
    if not result.success:
        print(describe_error(result.error), file=sys.stderr)
        return
    message = result.data
    print(message.content)
    if message.sources:
        print("\nSources:")
        for source in message.sources:
            print(f"  - {source if isinstance(source, str) else source.title}")


def print_quota(chat: ChatSession) -> None:
    if not chat.is_authenticated:
        print(f"[Guest mode: {chat.quota.queries_remaining} queries remaining]")


async def run_ask(args: argparse.Namespace, settings: LexiTaxSettings) -> int:
    chat = get_chat_session(get_session_manager(settings), settings)
    try:
        await chat.initialize()
        result = await chat.submit_query(" ".join(args.question))
        print_answer(result)
        print_quota(chat)
        return 0 if result.success else 1
    finally:
        await chat.aclose()


REPL_HELP = """Commands:
  /new           start a new conversation
  /list          list conversations
  /select N      switch to conversation N from /list
  /quit          leave
Anything else is sent as a question."""


async def run_chat(args: argparse.Namespace, settings: LexiTaxSettings) -> int:
    chat = get_chat_session(get_session_manager(settings), settings)
    await chat.initialize()
    print("LexiTax AI assistant. Type /help for commands.")
    print_quota(chat)
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            line = line.strip()
            if not line:
                continue
            if line in ("/quit", "/exit"):
                break
            if line == "/help":
                print(REPL_HELP)
            elif line == "/new":
                chat.new_conversation()
                print("Started a new conversation.")
            elif line == "/list":
                for index, conversation in enumerate(chat.conversations, start=1):
                    marker = "*" if conversation.id == chat.active_conversation_id else " "
                    print(f"{marker} {index}. {conversation.title}")
            elif line.startswith("/select"):
                _, _, number = line.partition(" ")
                if not number.strip().isdigit() or not 1 <= int(number) <= len(chat.conversations):
                    print("No such conversation.")
                    continue
                chat.select_conversation(chat.conversations[int(number) - 1].id)
                for message in chat.visible_messages:
                    print(f"[{message.role.value}] {message.content}\n")
            else:
                print_answer(await chat.submit_query(line))
                print_quota(chat)
    finally:
        await chat.aclose()
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from lexitax.server.app import create_app

    uvicorn.run(create_app(guest_query_limit=args.guest_limit), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lexitax", description="LexiTax tax-law AI assistant")
    parser.add_argument("--base-url", help="API base URL (default from LEXITAX_BASE_URL)")
    parser.add_argument(
        "--token-file", type=Path, default=DEFAULT_TOKEN_FILE, help="Where the credential is kept"
    )
    parser.add_argument("--api", action="store_true", help="Answer through the backend instead of canned responses")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    signup = subparsers.add_parser("signup", help="Create an account")
    signup.add_argument("--email", required=True)
    signup.add_argument("--name", required=True, help="Full name")
    signup.add_argument("--password", help="Prompted for when omitted")

    login = subparsers.add_parser("login", help="Sign in")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")

    subparsers.add_parser("logout", help="Sign out and forget the credential")

    ask = subparsers.add_parser("ask", help="Ask a single question")
    ask.add_argument("question", nargs="+")

    subparsers.add_parser("chat", help="Interactive chat session")

    serve = subparsers.add_parser("serve", help="Run the in-memory mock backend")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--guest-limit", type=int, default=3, help="Queries per guest")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        return run_serve(args)

    settings = build_settings(args)
    commands = {
        "signup": run_signup,
        "login": run_login,
        "logout": run_logout,
        "ask": run_ask,
        "chat": run_chat,
    }
    try:
        return asyncio.run(commands[args.command](args, settings))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
