"""
Terminal front end for the sync layer.

Usage:
    # Check the Gateway is up
    pokerclient health

    # Follow the table, refreshing every second
    pokerclient watch --interval 1000

    # Take an action, then print the refreshed table
    pokerclient act call
    pokerclient act raise 200

    # Ask the local engine to join a peer
    pokerclient connect localhost:3000
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import settings
from .errors import PokerClientError
from .gateway import GatewayClient
from .models.game import PlayersSnapshot, TableState
from .sync import ActionDispatcher, GameStateStore, StoreSnapshot


def format_table(table: Optional[TableState], players: Optional[PlayersSnapshot] = None) -> str:
    """Render the table as plain text."""
    if table is None:
        return "(no table state yet)"

    lines = []
    lines.append(f"=== {table.status.value} ===   Pot: {table.pot}   Highest bet: {table.highest_bet}")
    board = " ".join(str(c) for c in table.community_cards)
    lines.append("Board: " + (board if board else "(none)"))
    hand = " ".join(str(c) for c in table.my_hand)
    lines.append("Your hand: " + (hand if hand else "?? ??"))
    lines.append(f"Your stack: {table.my_stack}   Min raise: {table.min_raise}")
    if table.is_my_turn:
        lines.append("Your turn: " + ", ".join(a.value for a in table.valid_actions))
    else:
        lines.append(f"Waiting on player {table.current_turn_id}")

    if players is not None:
        lines.append("")
        lines.append(format_players(players))
    return "\n".join(lines)


def format_players(players: PlayersSnapshot) -> str:
    """Render the roster, one player per line."""
    lines = [f"Players ({players.active_players}/{players.total_players} active):"]
    for p in players.players:
        tags = []
        if p.is_dealer:
            tags.append("D")
        if p.is_small_blind:
            tags.append("SB")
        if p.is_big_blind:
            tags.append("BB")
        if p.is_folded:
            tags.append("folded")
        if p.is_all_in:
            tags.append("all-in")
        marker = ">" if p.is_current_turn else " "
        lines.append(
            f" {marker} #{p.player_id:<3} {p.listen_addr:<20} stack={p.stack:<7} "
            f"bet={p.current_bet:<6} {' '.join(tags)}".rstrip()
        )
    return "\n".join(lines)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Poker table client")
    parser.add_argument("--base-url", default=settings.base_url,
                        help=f"Gateway base URL (default: {settings.base_url})")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="Log level (debug, info, warning, error)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("health", help="Check the Gateway")
    sub.add_parser("table", help="Print the table once")
    sub.add_parser("players", help="Print the player roster once")

    watch = sub.add_parser("watch", help="Follow the table as it changes")
    watch.add_argument("--interval", type=int, default=settings.poll_interval_ms,
                       help="Poll interval in ms")
    watch.add_argument("--count", type=int, default=0,
                       help="Stop after N updates (default: run until interrupted)")

    act = sub.add_parser("act", help="Take an action")
    act.add_argument("kind", help="FOLD, CHECK, CALL, BET, RAISE or READY")
    act.add_argument("value", type=int, nargs="?", help="Amount for BET and RAISE")

    connect = sub.add_parser("connect", help="Join a peer")
    connect.add_argument("addr", help="Peer address, e.g. localhost:3000")
    return parser.parse_args(argv)


async def watch(gateway: GatewayClient, interval_ms: int, count: int) -> int:
    """Print the table on every store update until disconnected."""
    store = GameStateStore(gateway, poll_interval_ms=interval_ms)
    updates: asyncio.Queue[StoreSnapshot] = asyncio.Queue()
    store.subscribe(updates.put_nowait)

    await store.start()
    seen = 0
    try:
        while True:
            snapshot = await updates.get()
            if snapshot.loading:
                continue
            if not snapshot.connected:
                print(f"Disconnected: {snapshot.error}")
                return 1
            print(format_table(snapshot.table, snapshot.players))
            print("")
            seen += 1
            if count and seen >= count:
                return 0
    finally:
        await store.close()


async def act(gateway: GatewayClient, kind: str, value: Optional[int]) -> int:
    store = GameStateStore(gateway, poll_interval_ms=0)
    dispatcher = ActionDispatcher(gateway, on_success=store.refresh)

    response = await dispatcher.execute_action(kind, value)
    if response is None:
        print(f"Action failed: {dispatcher.error}")
        return 1

    print(f"{response.status}" + (f" {response.value}" if response.value is not None else ""))
    snapshot = store.current_state()
    if snapshot.connected:
        print(format_table(snapshot.table, snapshot.players))
    else:
        print(f"Could not refresh table: {snapshot.error}")
    return 0


async def run(args) -> int:
    gateway = GatewayClient(args.base_url)
    try:
        if args.command == "health":
            health = await gateway.health()
            print(f"{health.status} (game: {health.game_status})")
        elif args.command == "table":
            print(format_table(await gateway.get_table_state()))
        elif args.command == "players":
            print(format_players(await gateway.get_players()))
        elif args.command == "watch":
            return await watch(gateway, args.interval, args.count)
        elif args.command == "act":
            return await act(gateway, args.kind, args.value)
        elif args.command == "connect":
            ack = await gateway.connect_peer(args.addr)
            print(ack.model_dump_json())
    except PokerClientError as e:
        print(f"Error: {e.message}")
        return 1
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
