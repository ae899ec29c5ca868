"""
Immunity CLI - Command-line interface for the engine.

Usage:
    immunity play [--seed N]                   Play a game in the terminal
    immunity simulate [--games N] [--policy P] Run automated games, print win rate
    immunity pathogens                         List the pathogen catalog
    immunity validate <content.json>           Validate an authored content file
"""

import argparse
import json
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Immunity - Turn-based immune system card battle",
        prog="immunity",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible game")
    play_parser.add_argument("--content", help="JSON file with custom pathogens")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Run automated games")
    simulate_parser.add_argument("--games", "-n", type=int, default=100, help="Number of games")
    simulate_parser.add_argument("--policy", default="greedy", help="first, random or greedy")
    simulate_parser.add_argument("--seed", type=int, default=0, help="Seed of the first game")

    # Pathogens command
    subparsers.add_parser("pathogens", help="List the pathogen catalog")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a content file")
    validate_parser.add_argument("content_file", help="Path to JSON content file")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "pathogens":
        cmd_pathogens(args)
    elif args.command == "validate":
        cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Interactive text game."""
    from .content import create_game

    templates = None
    if args.content:
        templates = _load_templates(args.content)

    context = create_game(seed=args.seed, templates=templates, start=True)
    engine = context.engine

    print("Defend the body! Commands: <number> play card, b <tag> buy, "
          "bh <tag> buy with HP, e end turn, q quit")
    while not engine.is_game_over:
        _print_state(engine)
        try:
            command = input("> ").strip()
        except EOFError:
            break
        if command == "q":
            break
        if command == "e":
            result = engine.end_player_turn()
        elif command.startswith(("b ", "bh ")):
            use_health = command.startswith("bh ")
            result = engine.purchase_item(command.split(maxsplit=1)[1], use_health=use_health)
        elif command.isdigit():
            hand = engine.get_player_hand()
            index = int(command) - 1
            if not 0 <= index < len(hand):
                print("No such card")
                continue
            result = engine.play_card(hand[index])
        else:
            print("Unknown command")
            continue

        if not result.success:
            print(f"  ! {result.error}")
        for change in result.state_changes:
            print(f"  - {change}")

    if engine.is_game_over:
        state = engine.state
        print(f"\nGame over: {state.outcome.value} ({state.reason.value})")


def _print_state(engine):
    stats = engine.get_player_stats()
    print(f"\n=== Turn {engine.turn_number} ===")
    print(
        f"HP {stats.hp}/{stats.max_hp}  defense {stats.flat_defense} flat, "
        f"{stats.percentage_defense}%  tokens {stats.tokens}"
        + ("  [boosted]" if stats.boost_active else "")
    )
    for pathogen in engine.get_active_pathogens():
        marker = "*" if pathogen is engine.queue.current_target else " "
        blocked = f" blocks {', '.join(sorted(pathogen.blocked_tags))}" if pathogen.blocked_tags else ""
        print(f" {marker} {pathogen.name}: {pathogen.current_hp}/{pathogen.max_hp} HP{blocked}")
    print(f"Hand ({engine.cards_remaining_this_turn} plays left):")
    for i, card in enumerate(engine.get_player_hand(), 1):
        flag = " (blocked)" if engine.is_card_blocked(card) else ""
        print(f"  {i}. {card.name}{flag}")
    offers = engine.get_shop_offers()
    if offers:
        print("Shop: " + ", ".join(
            f"{o.tag} ({o.cost.tokens}t/{o.cost.health}hp)" if o.cost else o.tag for o in offers
        ))


def cmd_simulate(args):
    """Run automated games and report results."""
    from .bots import get_policy
    from .content import create_game
    from .session import GameLoop

    try:
        get_policy(args.policy)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    wins = 0
    total_turns = 0
    reasons: dict[str, int] = {}
    for game in range(args.games):
        seed = args.seed + game
        context = create_game(seed=seed, start=True)
        summary = GameLoop(context.engine).run_to_completion(get_policy(args.policy, seed=seed))
        wins += summary.won
        total_turns += summary.turns_played
        reasons[summary.reason or "unfinished"] = reasons.get(summary.reason or "unfinished", 0) + 1

    games = max(1, args.games)
    print(f"Policy: {args.policy}")
    print(f"Games: {args.games}")
    print(f"Win rate: {wins / games:.1%}")
    print(f"Average turns: {total_turns / games:.1f}")
    for reason, count in sorted(reasons.items()):
        print(f"  {reason}: {count}")


def cmd_pathogens(args):
    """List the pathogen catalog."""
    from .content import BASE_PATHOGENS
    from .engine_core.abilities import attack_pattern

    for template in BASE_PATHOGENS:
        print(f"{template.name}: {template.max_hp} HP, {template.attack_power} attack, "
              f"attacks on turns {attack_pattern(template, 6)}")
        for kind, ability in template.abilities.items():
            extra = f" {sorted(ability.blocked_tags)}" if ability.blocked_tags else f" {ability.value}"
            print(f"    {kind.value}{extra} every {ability.trigger_interval} turn(s)")


def cmd_validate(args):
    """Validate a content file."""
    from .data_schema import validate_cards, validate_templates
    from .content import ALL_CARDS
    from .engine_core.pathogen import TemplateError

    bundle = _load_bundle(args.content_file)
    try:
        templates = bundle.to_templates()
        cards = bundle.to_definitions()
    except TemplateError as e:
        print(f"Error: Invalid content: {e}")
        sys.exit(1)
    known_tags = {c.tag for c in ALL_CARDS} | {c.tag for c in cards}

    results = [validate_templates(templates, known_tags)]
    if cards:
        results.append(validate_cards(cards))

    valid = True
    for result in results:
        for error in result.errors:
            print(f"ERROR: {error}")
        for warning in result.warnings:
            print(f"WARNING: {warning}")
        valid = valid and result.valid

    print(f"{len(templates)} pathogen(s), {len(cards)} card(s): {'valid' if valid else 'invalid'}")
    if not valid:
        sys.exit(1)


def _load_bundle(path):
    from pydantic import ValidationError
    from .data_schema import load_content
    from .engine_core.pathogen import TemplateError

    try:
        return load_content(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except (ValidationError, TemplateError, json.JSONDecodeError) as e:
        print(f"Error: Invalid content: {e}")
        sys.exit(1)


def _load_templates(path):
    from .engine_core.pathogen import TemplateError

    bundle = _load_bundle(path)
    try:
        return bundle.to_templates()
    except TemplateError as e:
        print(f"Error: Invalid content: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
