import argparse
import shlex
import sys
import time
from typing import Optional

from loguru import logger

from .config import config
from .game import Game
from .notation import FILES
from .policy import GreedyPolicy, capture_value
from .types import Archetype, Owner, Phase

GLYPHS = {
    Archetype.PAWN: "p",
    Archetype.KNIGHT: "n",
    Archetype.BISHOP: "b",
    Archetype.ROOK: "r",
    Archetype.QUEEN: "q",
    Archetype.KING: "k",
}

HELP = """Commands:
  buy <type>                 purchase pawn/knight/bishop/rook/queen (SHOP)
  place <sq>                 place the purchased piece, e.g. place d3 (PLACEMENT)
  cancel                     refund the pending purchase (PLACEMENT)
  start                      start the next wave (SHOP)
  select <sq>                select one of your pieces (BATTLE)
  move <from> <to>           move a piece, e.g. move d3 d4 (BATTLE)
  end                        end your turn (BATTLE)
  spawn <owner> <type> <sq>  debug: force a piece onto a square
  board | reset | help | quit"""


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Chess Siege: defend the e4 king against 20 waves"
    )
    parser.add_argument(
        "--autoplay",
        action="store_true",
        help="Let a scripted defender play and print the outcome",
    )
    parser.add_argument(
        "--max-waves",
        type=int,
        default=config.TOTAL_WAVES,
        help="Stop autoplay after this many waves",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=500,
        help="Stop autoplay after this many player turns",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.LOG_LEVEL,
        help="loguru level for engine logs (DEBUG, INFO, WARNING...)",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def render(game: Game) -> str:
    """ASCII board, player pieces upper-case, with the status line underneath."""
    size = config.BOARD_SIZE
    lines = []
    highlights = set(game.selected_moves())
    for y in range(size):
        row = []
        for x in range(size):
            piece = game.board.at(x, y)
            if piece is None:
                row.append("*" if (x, y) in highlights else ".")
                continue
            glyph = GLYPHS[piece.archetype]
            row.append(glyph.upper() if piece.owner is Owner.PLAYER else glyph)
        lines.append(f"{size - y} {' '.join(row)}")
    lines.append("  " + " ".join(FILES[:size]))
    steps = game.steps_remaining
    lines.append(
        f"Wave {min(game.wave, config.TOTAL_WAVES)}/{config.TOTAL_WAVES} | "
        f"pts: {game.balance} | pawns: {game.pawns_bought}/{config.PAWN_CAP_PER_ROUND} | "
        f"steps: {'inf' if steps is None else steps} | {game.phase.value}"
    )
    lines.append(game.message)
    return "\n".join(lines)


def execute(game: Game, line: str) -> Optional[bool]:
    """Run one command line. Returns False to quit, None for unknown input."""
    try:
        parts = shlex.split(line)
    except ValueError as e:
        print(f"Could not parse command: {e}")
        return None
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("quit", "exit", "q"):
        return False
    if cmd == "help":
        print(HELP)
        return True
    if cmd == "board":
        return True
    if cmd == "reset":
        game.reset()
    elif cmd == "buy" and len(args) == 1:
        game.purchase(args[0])
    elif cmd == "place" and len(args) == 1:
        game.place_at(args[0])
    elif cmd == "cancel":
        game.cancel_placement()
    elif cmd == "start":
        game.start_wave()
    elif cmd == "select" and len(args) == 1:
        game.select_at(args[0])
    elif cmd == "move" and len(args) == 2:
        game.move_at(args[0], args[1])
    elif cmd == "end":
        result = game.end_player_turn(resolve=False)
        if result.ok:
            if config.ENEMY_PHASE_DELAY > 0:
                time.sleep(config.ENEMY_PHASE_DELAY)
            game.resolve_enemy_phase()
    elif cmd == "spawn" and len(args) == 3:
        game.force_spawn_at(args[1], args[0], args[2])
    else:
        print(f"Unknown command '{line.strip()}'. Type 'help'.")
        return None
    return True


def play_interactive(game: Game) -> None:
    print(HELP)
    print(render(game))
    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        outcome = execute(game, line)
        if outcome is False:
            break
        print(render(game))


def autoplay_turn(game: Game, policy: GreedyPolicy) -> None:
    """Scripted defender: take the best capture available to each piece, then end the turn."""
    for piece in sorted(game.board.by_owner(Owner.PLAYER), key=lambda p: p.y):
        current = game.board.get(piece.piece_id)
        if current is None or current.has_acted:
            continue
        moves = game.legal_moves_for(current.piece_id)
        if not moves:
            continue
        best = policy.rank(current, game.board, moves)[0]
        if capture_value(game.board, best) > 0:
            game.move_piece(current.piece_id, best.x, best.y)
    game.end_player_turn()


def autoplay_shop(game: Game) -> None:
    while game.economy.check_purchase(Archetype.PAWN) is None:
        squares = game.placement_squares()
        if not squares or not game.purchase(Archetype.PAWN).ok:
            break
        # front row of the player half first
        game.place_purchased_piece(squares[0].x, squares[0].y)
    game.start_wave()


def autoplay(game: Game, max_waves: int, max_steps: int = 500) -> Game:
    policy = GreedyPolicy(name="defender")
    turns = 0
    while not game.is_over and game.wave <= max_waves and turns < max_steps:
        if game.phase is Phase.SHOP:
            autoplay_shop(game)
        elif game.phase is Phase.BATTLE_PLAYER:
            autoplay_turn(game, policy)
            turns += 1
        else:
            logger.warning(f"Autoplay stopped in unexpected phase {game.phase.value}")
            break
    return game


def main(argv=None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    game = Game()
    if args.autoplay:
        print("--- Chess Siege autoplay ---")
        start_time = time.time()
        autoplay(game, args.max_waves, args.max_steps)
        print(render(game))
        print(f"Finished in {time.time() - start_time:.2f}s")
        return
    play_interactive(game)


if __name__ == "__main__":
    main()
