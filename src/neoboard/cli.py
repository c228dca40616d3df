"""Command line front end for NeoBoard.

Usage examples::

    neoboard boards
    neoboard threads 1 --sort newest
    neoboard login demo@example.com password
    neoboard reply 12 "Nice thread" --reply-to 40

Without ``NEOBOARD_API_URL`` (or ``--api-url``) every command runs against a
freshly seeded in-memory mock forum.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from collections.abc import Awaitable, Callable, Sequence

from neoboard.client import ApiError, ClientSettings, ForumClient, create_client
from neoboard.core.logging import configure_logging
from neoboard.core.validation import BoardCategory
from neoboard.views import (
    render_board,
    render_post,
    render_thread,
    render_user,
)

logger = logging.getLogger(__name__)

Command = Callable[[ForumClient, argparse.Namespace], Awaitable[None]]


async def cmd_boards(client: ForumClient, args: argparse.Namespace) -> None:
    boards = await client.boards.list()
    if not boards:
        print("No boards yet.")
    for board in boards:
        print(render_board(board))


async def cmd_board(client: ForumClient, args: argparse.Namespace) -> None:
    print(render_board(await client.boards.get(args.board_id)))


async def cmd_threads(client: ForumClient, args: argparse.Namespace) -> None:
    threads = await client.threads.list_by_board(
        args.board_id, sort=args.sort, page=args.page, limit=args.limit
    )
    if not threads:
        print("No threads on this page.")
    for thread in threads:
        print(render_thread(thread))


async def cmd_thread(client: ForumClient, args: argparse.Namespace) -> None:
    thread = await client.threads.get(args.thread_id)
    posts = await client.posts.list_by_thread(args.thread_id, page=args.page, limit=args.limit)
    print(render_thread(thread))
    print()
    for post in posts:
        print(render_post(post))
        print()


async def cmd_post(client: ForumClient, args: argparse.Namespace) -> None:
    thread = await client.threads.create(
        args.board_id, args.title, args.content, images=args.image, tags=args.tag
    )
    print(render_thread(thread, full=True))


async def cmd_reply(client: ForumClient, args: argparse.Namespace) -> None:
    post = await client.posts.create(
        args.thread_id, args.content, images=args.image, reply_to=args.reply_to
    )
    print(render_post(post))


async def cmd_edit_post(client: ForumClient, args: argparse.Namespace) -> None:
    print(render_post(await client.posts.update(args.post_id, args.content)))


async def cmd_delete_post(client: ForumClient, args: argparse.Namespace) -> None:
    print(await client.posts.delete(args.post_id))


async def cmd_delete_thread(client: ForumClient, args: argparse.Namespace) -> None:
    print(await client.threads.delete(args.thread_id))


def _flag_command(flag: str, value: bool) -> Command:
    async def run(client: ForumClient, args: argparse.Namespace) -> None:
        thread = await client.threads.update(args.thread_id, **{flag: value})
        print(render_thread(thread))

    return run


async def cmd_new_board(client: ForumClient, args: argparse.Namespace) -> None:
    board = await client.boards.create(
        args.name, args.description, category=args.category, is_nsfw=args.nsfw
    )
    print(render_board(board))


async def cmd_login(client: ForumClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    result = await client.auth.login(args.email, password)
    print(f"Logged in as {render_user(result.user)}")


async def cmd_register(client: ForumClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    result = await client.auth.register(args.username, args.email, password)
    print(f"Registered {render_user(result.user)}")


async def cmd_anonymous(client: ForumClient, args: argparse.Namespace) -> None:
    result = await client.auth.login_anonymous()
    print(f"Posting as {render_user(result.user)}")


async def cmd_whoami(client: ForumClient, args: argparse.Namespace) -> None:
    print(render_user(await client.auth.current_user()))


async def cmd_logout(client: ForumClient, args: argparse.Namespace) -> None:
    await client.auth.logout()
    print("Logged out successfully")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="neoboard", description="NeoBoard message board client")
    parser.add_argument("--api-url", help="API root, e.g. http://localhost:3001/api")
    parser.add_argument("-v", "--verbose", action="store_true", help="log API traffic")
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name: str, handler: Command, help_text: str,
            aliases: Sequence[str] = ()) -> argparse.ArgumentParser:
        command = sub.add_parser(name, help=help_text, aliases=list(aliases))
        command.set_defaults(handler=handler)
        return command

    add("boards", cmd_boards, "list boards")

    p = add("board", cmd_board, "show one board")
    p.add_argument("board_id", type=int)

    p = add("threads", cmd_threads, "list a board's threads")
    p.add_argument("board_id", type=int)
    p.add_argument("--sort", choices=["activity", "newest", "oldest", "replies"])
    p.add_argument("--page", type=int)
    p.add_argument("--limit", type=int)

    p = add("thread", cmd_thread, "show a thread and its posts")
    p.add_argument("thread_id", type=int)
    p.add_argument("--page", type=int)
    p.add_argument("--limit", type=int)

    p = add("post", cmd_post, "open a new thread", aliases=["new-thread"])
    p.add_argument("board_id", type=int)
    p.add_argument("title")
    p.add_argument("content")
    p.add_argument("--image", action="append", default=[], help="image URL (repeatable)")
    p.add_argument("--tag", action="append", default=[], help="tag (repeatable)")

    p = add("reply", cmd_reply, "reply in a thread")
    p.add_argument("thread_id", type=int)
    p.add_argument("content")
    p.add_argument("--reply-to", type=int, help="post being answered")
    p.add_argument("--image", action="append", default=[], help="image URL (repeatable)")

    p = add("edit-post", cmd_edit_post, "replace a post's content")
    p.add_argument("post_id", type=int)
    p.add_argument("content")

    p = add("delete-post", cmd_delete_post, "delete a reply")
    p.add_argument("post_id", type=int)

    p = add("delete-thread", cmd_delete_thread, "delete a thread and its posts")
    p.add_argument("thread_id", type=int)

    for name, flag, value in (
        ("lock", "is_locked", True),
        ("unlock", "is_locked", False),
        ("sticky", "is_sticky", True),
        ("unsticky", "is_sticky", False),
    ):
        p = add(name, _flag_command(flag, value), f"{name} a thread")
        p.add_argument("thread_id", type=int)

    p = add("new-board", cmd_new_board, "create a board")
    p.add_argument("name", help="board name such as /tech/")
    p.add_argument("description")
    p.add_argument(
        "--category",
        choices=[c.value for c in BoardCategory],
        default=BoardCategory.GENERAL.value,
    )
    p.add_argument("--nsfw", action="store_true")

    p = add("login", cmd_login, "log in with email and password")
    p.add_argument("email")
    p.add_argument("password", nargs="?")

    p = add("register", cmd_register, "create an account")
    p.add_argument("username")
    p.add_argument("email")
    p.add_argument("password", nargs="?")

    add("anonymous", cmd_anonymous, "post as an anonymous user")
    add("whoami", cmd_whoami, "show the logged-in user")
    add("logout", cmd_logout, "forget the stored token")
    return parser


async def _run(args: argparse.Namespace, config: ClientSettings) -> None:
    async with create_client(args.api_url, config=config) as client:
        await args.handler(client, args)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``neoboard`` command."""
    args = build_parser().parse_args(argv)
    config = ClientSettings()
    configure_logging("DEBUG" if args.verbose else config.log_level)

    try:
        asyncio.run(_run(args, config))
    except ApiError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
