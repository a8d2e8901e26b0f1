#!/usr/bin/env python3
"""
BoaSnake Offline Benchmarking Tool

This script plays the BoaSnake engine on the local simulator, either alone
(survival) or against a second copy of itself (duel), and generates a report.

Usage:
    python benchmark_snakes.py [--iterations N] [--workers N] [--mode solo|duel]

The script will:
1. Run N games (default 100) in parallel worker processes
2. Collect turns survived, final lengths and death reasons
3. Save summary.json and report.txt to benchmarks/
"""

import argparse
import json
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import sympy
from tqdm import tqdm

from boa_snake.board import Board, Snake
from boa_snake.logic import decide
from boa_snake.simulator import run_game

FIRST_SNAKE = "BoaA"
SECOND_SNAKE = "BoaB"


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs"""
    iterations: int = 100
    workers: int = 8
    width: int = 11
    height: int = 11
    mode: str = "solo"
    max_turns: int = 300
    timeout_ms: int = 150
    output_root: str = "benchmarks"


@dataclass
class GameSummary:
    """Result of a single game"""
    game_num: int
    seed: int
    winner: Optional[str]
    turns: int = 0
    lengths: Dict[str, int] = field(default_factory=dict)
    death_reasons: Dict[str, str] = field(default_factory=dict)
    error: str = ""


@dataclass
class BenchmarkStats:
    """Aggregated benchmark statistics"""
    total_games: int = 0
    errors: int = 0
    draws: int = 0
    wins: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    total_turns: int = 0
    total_length: int = 0
    survived_games: int = 0

    death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    game_results: List[GameSummary] = field(default_factory=list)

    @property
    def valid_games(self) -> int:
        return self.total_games - self.errors

    @property
    def avg_turns(self) -> float:
        return self.total_turns / self.valid_games if self.valid_games > 0 else 0

    @property
    def avg_length(self) -> float:
        return self.total_length / self.survived_games if self.survived_games > 0 else 0

    def win_rate(self, name: str) -> float:
        return self.wins[name] / self.valid_games * 100 if self.valid_games > 0 else 0

    def add(self, result: GameSummary):
        self.total_games += 1
        self.game_results.append(result)

        if result.error:
            self.errors += 1
            return

        if result.winner is None:
            self.draws += 1
        else:
            self.wins[result.winner] += 1

        self.total_turns += result.turns
        for length in result.lengths.values():
            self.total_length += length
            self.survived_games += 1

        for reason in result.death_reasons.values():
            # "wall collision (turn 12)" -> "wall collision"
            self.death_reasons[reason.split(" (turn")[0]] += 1


def engine_move(game_state: dict) -> str:
    """Strategy adapter: run the engine sequentially on a simulator payload."""
    board = Board.from_dict(game_state["board"])
    you = Snake.from_dict(game_state["you"])
    return decide(board, you, game_state["game"]["timeout"])


def run_single_game(game_num: int, seed: int, config: BenchmarkConfig) -> GameSummary:
    """Run a single game and return the result"""
    strategies = {FIRST_SNAKE: engine_move}
    if config.mode == "duel":
        strategies[SECOND_SNAKE] = engine_move

    summary = GameSummary(game_num=game_num, seed=seed, winner=None)
    try:
        result = run_game(
            strategies,
            width=config.width,
            height=config.height,
            max_turns=config.max_turns,
            seed=seed,
            timeout_ms=config.timeout_ms,
        )
    except Exception as e:
        summary.error = str(e)
        return summary

    summary.winner = result.winner
    summary.turns = result.turns
    summary.lengths = {sid: s["length"] for sid, s in result.final_snakes.items()}
    summary.death_reasons = result.death_reasons
    return summary


def prime_seeds(count: int, start: int = 100) -> List[int]:
    """Consecutive primes above start, one per game."""
    seeds = []
    last_prime = start
    for _ in range(count):
        last_prime = int(sympy.nextprime(last_prime))
        seeds.append(last_prime)
    return seeds


class BenchmarkRunner:
    """Main benchmark runner"""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.stats = BenchmarkStats()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.output_dir = Path(config.output_root) / f"benchmark_{timestamp}"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def run(self) -> BenchmarkStats:
        """Run all benchmark games"""
        print("=" * 70)
        print("     BOASNAKE OFFLINE BENCHMARK")
        print(f"     Mode: {self.config.mode}")
        print(f"     Running {self.config.iterations} games with {self.config.workers} workers")
        print(f"     Board: {self.config.width}x{self.config.height}")
        print("=" * 70)
        print()

        game_params = list(enumerate(prime_seeds(self.config.iterations)))

        with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
            futures = {
                executor.submit(run_single_game, game_num, seed, self.config): game_num
                for game_num, seed in game_params
            }

            bar_fmt = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}] {postfix}"
            with tqdm(total=self.config.iterations, desc="Running games", bar_format=bar_fmt) as pbar:
                for future in as_completed(futures):
                    self.stats.add(future.result())
                    pbar.set_postfix({
                        "Turns": f"{self.stats.avg_turns:.0f}",
                        "Errors": self.stats.errors,
                    })
                    pbar.update(1)

        return self.stats

    def generate_report(self) -> str:
        """Generate a benchmark report"""
        s = self.stats

        report = []
        report.append("\n" + "=" * 70)
        report.append("                    BENCHMARK REPORT")
        report.append("=" * 70)

        report.append("\n📊 OVERALL RESULTS")
        report.append("-" * 40)
        report.append(f"   Total Games:     {s.total_games}")
        report.append(f"   Valid Games:     {s.valid_games}")
        report.append(f"   Errors:          {s.errors}")
        report.append("")

        if self.config.mode == "duel":
            report.append("🏆 WIN RATES")
            report.append("-" * 40)
            for name in (FIRST_SNAKE, SECOND_SNAKE):
                report.append(f"   {name}:  {s.wins[name]:4d} wins ({s.win_rate(name):5.1f}%)")
            report.append(f"   Draws:  {s.draws:4d}")
            report.append("")
        else:
            report.append("🏆 SURVIVAL")
            report.append("-" * 40)
            report.append(f"   Survived {self.config.max_turns} turns: "
                          f"{s.wins[FIRST_SNAKE]:4d} ({s.win_rate(FIRST_SNAKE):5.1f}%)")
            report.append("")

        report.append("📈 PERFORMANCE STATISTICS")
        report.append("-" * 40)
        report.append(f"   Average Game Length:     {s.avg_turns:.1f} turns")
        report.append(f"   Avg Length of Survivors: {s.avg_length:.1f}")
        report.append("")

        if s.death_reasons:
            report.append("💀 DEATH REASONS")
            report.append("-" * 40)
            for reason, count in sorted(s.death_reasons.items(), key=lambda x: -x[1]):
                report.append(f"   {reason:40s} {count:4d}")
            report.append("")

        if s.valid_games >= 30:
            # Simple binomial confidence interval approximation
            p = s.wins[FIRST_SNAKE] / s.valid_games
            se = (p * (1 - p) / s.valid_games) ** 0.5
            ci_low = max(0, p - 1.96 * se)
            ci_high = min(1, p + 1.96 * se)

            report.append("📉 STATISTICAL ANALYSIS")
            report.append("-" * 40)
            report.append(f"   {FIRST_SNAKE} Win Rate: {p*100:.1f}%")
            report.append(f"   95% Confidence Interval: [{ci_low*100:.1f}%, {ci_high*100:.1f}%]")
            report.append("")

        report.append("=" * 70)
        report.append(f"   Results saved to: {self.output_dir}")
        report.append("=" * 70)

        return "\n".join(report)

    def save_results(self):
        """Save benchmark results to files"""
        summary = {
            "config": {
                "iterations": self.config.iterations,
                "workers": self.config.workers,
                "width": self.config.width,
                "height": self.config.height,
                "mode": self.config.mode,
                "max_turns": self.config.max_turns,
                "timeout_ms": self.config.timeout_ms,
            },
            "results": {
                "total_games": self.stats.total_games,
                "errors": self.stats.errors,
                "draws": self.stats.draws,
                "wins": dict(self.stats.wins),
                "avg_turns": self.stats.avg_turns,
                "avg_length": self.stats.avg_length,
            },
            "death_reasons": dict(self.stats.death_reasons),
            "timestamp": datetime.now().isoformat(),
        }

        with open(self.output_dir / "summary.json", "w") as f:
            json.dump(summary, f, indent=2)

        report = self.generate_report()
        with open(self.output_dir / "report.txt", "w") as f:
            f.write(report)

        print(report)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Benchmark the BoaSnake engine on the local simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python benchmark_snakes.py                    # 100 solo games with 8 workers
    python benchmark_snakes.py --mode duel        # Engine against itself
    python benchmark_snakes.py --iterations 20 -w 4
        """
    )
    parser.add_argument("--iterations", "-n", type=int, default=100,
                        help="Number of games to run (default: 100)")
    parser.add_argument("--workers", "-w", type=int, default=8,
                        help="Number of parallel workers (default: 8)")
    parser.add_argument("--mode", choices=["solo", "duel"], default="solo",
                        help="Play alone or against a second engine (default: solo)")
    parser.add_argument("--width", type=int, default=11, help="Board width (default: 11)")
    parser.add_argument("--height", type=int, default=11, help="Board height (default: 11)")
    parser.add_argument("--max-turns", type=int, default=300,
                        help="Turn limit per game (default: 300)")
    parser.add_argument("--timeout", type=int, default=150,
                        help="Move timeout in ms given to the engine (default: 150)")

    args = parser.parse_args(argv)

    config = BenchmarkConfig(
        iterations=args.iterations,
        workers=args.workers,
        width=args.width,
        height=args.height,
        mode=args.mode,
        max_turns=args.max_turns,
        timeout_ms=args.timeout,
    )

    runner = BenchmarkRunner(config)
    runner.run()
    runner.save_results()


if __name__ == "__main__":
    main()
