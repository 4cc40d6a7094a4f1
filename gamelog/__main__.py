"""
Command line front end for the gamelog data layer.

    python -m gamelog login --email me@example.com
    python -m gamelog entries --user-id 3
    python -m gamelog add 42 --status PLAYING --platform PC
    python -m gamelog update 7 --page 2 --rating 9 --review "Great"
    python -m gamelog delete 7
    python -m gamelog stats
"""
import argparse
import asyncio
import getpass
import logging
import sys

from .app import GameLogApp, create_app
from .cache.selectors import select_all_game_entries, select_game_entry
from .controllers.actions import ActionResult
from .errors import describe_error
from .models import GameEntry, GameEntryStatus


def print_error(result: ActionResult) -> int:
    info = describe_error(result.error)
    print(f"Error ({info['error_type']}): {info['message']}")
    return 1


def format_entry(entry: GameEntry) -> str:
    name = entry.game_name or f"game {entry.game_id}"
    rating = f"{entry.rating}/10" if entry.rating is not None else "-"
    platforms = ", ".join(sorted(entry.platforms)) or "-"
    return f"[{entry.id}] {name:<40} {entry.status.label:<10} {rating:>5}  {platforms}"


async def cmd_login(app: GameLogApp, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = await app.user_actions.login(args.email, password)
    if not result.ok:
        return print_error(result)
    user = await app.user_actions.get_self_user()
    if user.ok:
        print(f"Logged in as {user.value.username}")
    return 0


async def cmd_register(app: GameLogApp, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = await app.user_actions.register(args.email, args.username, password)
    if not result.ok:
        return print_error(result)
    print(f"Registered and logged in as {args.username}")
    return 0


async def cmd_logout(app: GameLogApp, args) -> int:
    app.user_actions.logout()
    print("Logged out")
    return 0


async def cmd_entries(app: GameLogApp, args) -> int:
    result = await app.entry_actions.get_game_entries(
        page=args.page, query=args.query, user_id=args.user_id, game_id=args.game_id
    )
    if not result.ok:
        return print_error(result)
    entries = sorted(select_all_game_entries(app.game_entries.snapshot), key=lambda e: e.id)
    for entry in entries:
        print(format_entry(entry))
    print(f"{len(entries)} entries")
    return 0


async def cmd_add(app: GameLogApp, args) -> int:
    entry = GameEntry(
        id=None,
        game_id=args.game_id,
        user_id=None,
        status=GameEntryStatus[args.status],
        rating=args.rating,
        platforms=frozenset(args.platform or ()),
        review=args.review,
    )
    result = await app.entry_actions.create_game_entry(entry)
    if not result.ok:
        return print_error(result)
    print(f"Added {format_entry(result.value)}")
    return 0


async def cmd_update(app: GameLogApp, args) -> int:
    # Load the current value first; update sends the full entry
    listing = await app.entry_actions.get_game_entries(page=args.page, user_id=args.user_id)
    if not listing.ok:
        return print_error(listing)
    entry = select_game_entry(app.game_entries.snapshot, args.entry_id)
    if entry is None:
        where = f" on page {args.page}" if args.page else ""
        print(f"No entry with id {args.entry_id}{where} (try --page or --user-id)")
        return 1

    changes = {}
    if args.status:
        changes['status'] = GameEntryStatus[args.status]
    if args.rating is not None:
        changes['rating'] = args.rating
    if args.platform:
        changes['platforms'] = frozenset(args.platform)
    if args.review is not None:
        changes['review'] = args.review

    result = await app.entry_actions.update_game_entry(entry.edit(**changes))
    if not result.ok:
        return print_error(result)
    print(f"Updated {format_entry(app.game_entries.snapshot[args.entry_id])}")
    return 0


async def cmd_delete(app: GameLogApp, args) -> int:
    result = await app.entry_actions.delete_game_entry(args.entry_id)
    if not result.ok:
        return print_error(result)
    print(f"Deleted entry {args.entry_id}")
    return 0


async def cmd_stats(app: GameLogApp, args) -> int:
    result = await app.user_actions.get_self_statistics()
    if not result.ok:
        return print_error(result)
    stats = result.value
    print(f"Average rating: {stats.average_rating:.1f}/10")
    for status in GameEntryStatus:
        print(f"  {status.label:<10} {stats.status_count(status)}")
    for label, distribution in (("Genres", stats.game_genre_distribution),
                                ("Platforms", stats.platform_distribution)):
        if distribution:
            print(f"{label}: " + ", ".join(f"{k} ({v})" for k, v in sorted(distribution.items())))
    return 0


async def cmd_game(app: GameLogApp, args) -> int:
    result = await app.user_actions.get_game(args.game_id)
    if not result.ok:
        return print_error(result)
    game = result.value
    print(f"{game.name} ({game.release_date or 'unknown release'})")
    print(f"Platforms: {', '.join(game.platforms) or '-'}")
    print(f"Genres: {', '.join(game.genres) or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    statuses = [status.name for status in GameEntryStatus]

    parser = argparse.ArgumentParser(prog='gamelog', description='Track your game library')
    parser.add_argument('--api-url', help='API base URL (overrides GAMELOG_API_URL and settings)')
    parser.add_argument('--token-file', help='Where to keep the session tokens')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('login', help='Log in')
    p.add_argument('--email', required=True)
    p.add_argument('--password')
    p.set_defaults(func=cmd_login)

    p = sub.add_parser('register', help='Create an account and log in')
    p.add_argument('--email', required=True)
    p.add_argument('--username', required=True)
    p.add_argument('--password')
    p.set_defaults(func=cmd_register)

    p = sub.add_parser('logout', help='Forget the stored session')
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser('entries', help='List game entries')
    p.add_argument('--page', type=int)
    p.add_argument('--query')
    p.add_argument('--user-id', type=int)
    p.add_argument('--game-id', type=int)
    p.set_defaults(func=cmd_entries)

    for name, func in (('add', cmd_add), ('update', cmd_update)):
        p = sub.add_parser(name, help=f'{name.capitalize()} a game entry')
        p.add_argument('game_id' if name == 'add' else 'entry_id', type=int)
        p.add_argument('--status', choices=statuses, required=(name == 'add'))
        p.add_argument('--rating', type=int, choices=range(0, 11))
        p.add_argument('--platform', action='append')
        p.add_argument('--review')
        if name == 'update':
            p.add_argument('--page', type=int, help='Listing page holding the entry')
            p.add_argument('--user-id', type=int, help='Owner of the entry')
        p.set_defaults(func=func)

    p = sub.add_parser('delete', help='Delete a game entry')
    p.add_argument('entry_id', type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser('stats', help='Show your statistics')
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser('game', help='Show catalog info for a game')
    p.add_argument('game_id', type=int)
    p.set_defaults(func=cmd_game)

    return parser


async def run(args) -> int:
    app = create_app(base_url=args.api_url, token_file=args.token_file)
    try:
        return await args.func(app, args)
    finally:
        await app.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
