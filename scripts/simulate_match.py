#!/usr/bin/env python3
"""Play a random headless VIP match and print the result.

Usage:
    python3 scripts/simulate_match.py --teams 4 --players 4 --seed 7
    VIP_FIESTA_TARGET_VIP_KILLS=5 python3 scripts/simulate_match.py
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path when run from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from loguru import logger

from vipfiesta.app.config import VipFiestaSettings
from vipfiesta.app.main import configure_logging
from vipfiesta.simulation import MatchSimulator


def main():
    parser = argparse.ArgumentParser(description="Headless VIP match simulation")
    parser.add_argument("--teams", type=int, default=4, help="Number of teams")
    parser.add_argument("--players", type=int, default=4, help="Players per team")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--kills-per-second", type=float, default=1.5)
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    settings = VipFiestaSettings()
    sim = MatchSimulator(
        teams=args.teams,
        players_per_team=args.players,
        settings=settings,
        seed=args.seed,
        kills_per_second=args.kills_per_second,
    )
    report = sim.run()
    mode = sim.mode

    print(f"\n{'='*60}")
    print(f"  RESULT: team {mode.state.winner_team_id} wins ({mode.state.end_reason})")
    print(f"{'='*60}")
    for line in report.timeline:
        print(f"  {line}")

    print("\n  --- Standings ---")
    for s in mode.standings():
        print(f"  #{s.rank}  team {s.team_id:>3}  {s.vip_kills} VIP kills")

    print("\n  --- Scoreboard ---")
    print(f"  {'player':>6} {'team':>4} {'vip':>4} {'k':>4} {'d':>4} {'key':>12}")
    for row in mode.scoreboard_rows():
        print(f"  {row.player_id:>6} {row.team_id:>4} {row.vip_kills:>4} "
              f"{row.kills:>4} {row.deaths:>4} {row.sort_key:>12}")
    logger.debug(f"Final state: {mode.get_state()}")


if __name__ == "__main__":
    main()
