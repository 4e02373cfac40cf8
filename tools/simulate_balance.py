from __future__ import annotations

import argparse

from dungeoncrawler.engine.ai import simulate_win_rate
from dungeoncrawler.engine.settings import PRESETS, preset


def main() -> int:
    parser = argparse.ArgumentParser(prog="simulate_balance", description="Greedy-play win rates per difficulty.")
    parser.add_argument("--games", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--preset", action="append", choices=sorted(PRESETS), help="limit to these presets")
    args = parser.parse_args()

    names = args.preset or list(PRESETS)
    print(f"Win rates over {args.games} games per preset (seed {args.seed})")
    for name in names:
        rate = simulate_win_rate(preset(name), args.games, seed=args.seed)
        bar = "#" * round(rate * 50)
        print(f"  {name:<8} {bar:<50} {rate * 100:6.2f}%")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
