"""
Cubirds CLI - Command-line interface for the engine.

Usage:
    cubirds play [--ai] [--seed N]          Hot-seat game in the terminal
    cubirds simulate [--games N] [--seed N] Bot-vs-bot games, prints a summary
    cubirds species                         Print the species catalogue
    cubirds serve [--host H] [--port N]     Run the HTTP API
"""

import argparse
import logging
import random
import sys

from .bots import FirstLegalPolicy, OraclePolicy, RandomPolicy
from .engine_core import (
    ALL_SPECIES,
    DrawCardsMove,
    FlockMove,
    GameConfig,
    PassMove,
    PlayMove,
    RuleVariant,
    Side,
    SkipDrawMove,
    TurnPhase,
    apply_move,
    initialize_game,
    legal_moves,
)
from .engine_core.rules import hand_counts
from .engine_core.species import get_config
from .session import GameLoop, LoopState, RoomStore

logger = logging.getLogger(__name__)

POLICY_NAMES = ["first", "oracle", "random"]


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Cubirds - bird-flocking card game engine",
        prog="cubirds",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--ai", action="store_true", help="Second seat is the computer")
    play_parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    play_parser.add_argument("--names", nargs=2, default=None, help="Player names")
    play_parser.add_argument("--auto-draw", action="store_true", help="Legacy auto-draw ruleset")

    sim_parser = subparsers.add_parser("simulate", help="Run bot-vs-bot games")
    sim_parser.add_argument("--games", type=int, default=10, help="Number of games")
    sim_parser.add_argument("--seed", type=int, default=0, help="Base seed")
    sim_parser.add_argument("--policy", choices=POLICY_NAMES, default="random")
    sim_parser.add_argument("--max-moves", type=int, default=2000, help="Move cap per game")

    subparsers.add_parser("species", help="Print the species catalogue")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "species":
        cmd_species(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_species(args):
    """Print the species catalogue."""
    print(f"{'#':>2}  {'Species':<18} {'Total':>5} {'Small':>5} {'Big':>4}")
    for i, species in enumerate(ALL_SPECIES, start=1):
        cfg = get_config(species)
        print(f"{i:>2}  {cfg.emoji} {cfg.name:<16} {cfg.total:>5} {cfg.small_flock:>5} {cfg.big_flock:>4}")


def cmd_simulate(args):
    """Run bot-vs-bot games and summarize the results."""
    wins = {0: 0, 1: 0}
    unfinished = 0
    total_rounds = 0

    for game in range(args.games):
        seed = args.seed + game
        store = RoomStore()
        state = initialize_game(["Bot A", "Bot B"], seed=seed)
        room = store.create_room(state, room_id=f"SIM{game}")
        policies = {seat: _make_policy(args.policy, seed * 2 + seat) for seat in (0, 1)}
        loop = GameLoop(store, room.room_id, policies=policies, max_ai_moves=args.max_moves)

        result = loop.run_ai_turns()
        final = store.get_state(room.room_id)
        total_rounds += final.round_number
        if result.loop_state == LoopState.GAME_OVER and final.winner is not None:
            wins[final.winner] += 1
            logger.info("Game %d: %s won in round %d", game, final.players[final.winner].name, final.round_number)
        else:
            unfinished += 1
            logger.info("Game %d stopped: %s", game, result.loop_state.value)

    print(f"Games: {args.games}  policy: {args.policy}")
    print(f"Bot A wins: {wins[0]}  Bot B wins: {wins[1]}  unfinished: {unfinished}")
    if args.games:
        print(f"Average rounds: {total_rounds / args.games:.1f}")


def cmd_serve(args):
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from .api.app import create_app

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())


def _make_policy(name, seed):
    if name == "first":
        return FirstLegalPolicy()
    if name == "oracle":
        return OraclePolicy(rng=random.Random(seed))
    return RandomPolicy(seed=seed)


def cmd_play(args):
    """Interactive game in the terminal."""
    names = args.names or (["You", "Computer"] if args.ai else ["Player 1", "Player 2"])
    variant = RuleVariant.AUTO_DRAW if args.auto_draw else RuleVariant.DRAW_DECISION
    state = initialize_game(names, ai_enabled=args.ai, seed=args.seed,
                            config=GameConfig(rule_variant=variant))
    ai_policy = OraclePolicy(rng=random.Random(args.seed))
    shown = 0

    while not state.is_over:
        for line in state.action_log[shown:]:
            print(f"  > {line}")
        shown = len(state.action_log)

        player = state.current_player
        if player.is_ai:
            moves = legal_moves(state)
            if not moves:
                print(f"  ! {player.name} has no legal move")
                return
            decision = ai_policy.select_move(state, moves)
            state = apply_move(state, decision.move).new_state
            continue

        render(state)
        move = prompt_move(state)
        if move is None:
            print("Bye.")
            return
        outcome = apply_move(state, move)
        if not outcome.is_valid:
            print(f"  ! {outcome.message}")
            continue
        state = outcome.new_state

    for line in state.action_log[shown:]:
        print(f"  > {line}")
    render(state)


def render(state):
    """Print the table for the current player."""
    print()
    for i, row in enumerate(state.rows, start=1):
        print(f"Row {i}: " + " ".join(get_config(s).emoji for s in row)
              + "   " + ", ".join(s.value for s in row))
    for player in state.players:
        # Every species in catalogue order, zeros included
        banked = " ".join(f"{get_config(s).emoji}{n}" for s, n in player.collection_vector().items())
        print(f"{player.name}: {len(player.hand)} cards, collection: {banked}")

    player = state.current_player
    print(f"\n{player.name} ({state.turn_phase.value}) hand:")
    counts = hand_counts(player)
    for i, species in enumerate(ALL_SPECIES, start=1):
        if species in counts:
            cfg = get_config(species)
            print(f"  {i}. {cfg.emoji} {species.value} x{counts[species]}"
                  f"  (flock {cfg.small_flock}/{cfg.big_flock})")


def prompt_move(state):
    """Read a move for the current phase. Returns None to quit."""
    prompts = {
        TurnPhase.PLAY: "play <species#> <row 1-4> <l|r>: ",
        TurnPhase.DRAW_DECISION: "no capture - (d)raw 2 or (s)kip: ",
        TurnPhase.FLOCK_OR_PASS: "flock <species#> or (p)ass: ",
    }
    while True:
        try:
            text = input(prompts[state.turn_phase]).strip().lower()
        except EOFError:
            return None
        if text in ("q", "quit"):
            return None
        move = parse_move(state.turn_phase, text)
        if move is not None:
            return move
        print("  ? could not read that")


def parse_move(phase, text):
    """Turn terminal input into a move, or None if it does not parse."""
    parts = text.split()
    if not parts:
        return None

    if phase == TurnPhase.DRAW_DECISION:
        if parts[0] in ("d", "draw"):
            return DrawCardsMove()
        if parts[0] in ("s", "skip"):
            return SkipDrawMove()
        return None

    if phase == TurnPhase.FLOCK_OR_PASS:
        if parts[0] in ("p", "pass"):
            return PassMove()
        species = _species_at(parts[-1])
        return FlockMove(species=species) if species else None

    if len(parts) != 3 or parts[2] not in ("l", "r", "left", "right"):
        return None
    species = _species_at(parts[0])
    if species is None or not parts[1].isdigit():
        return None
    side = Side.LEFT if parts[2].startswith("l") else Side.RIGHT
    return PlayMove(species=species, row_index=int(parts[1]) - 1, side=side)


def _species_at(token):
    if not token.isdigit() or not 1 <= int(token) <= len(ALL_SPECIES):
        return None
    return ALL_SPECIES[int(token) - 1]


if __name__ == "__main__":
    main()
