"""
Command-line interface for Connect 4 MCTS.

Commands:
- play: Play against the engine in the terminal
- arena: Pit the engine against a random player or another budget
- benchmark: Time engine decisions
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import typer
from rich.console import Console

app = typer.Typer(
    name="c4m",
    help="Connect 4 MCTS - Play and evaluate",
    no_args_is_help=True,
)

console = Console()


def _load_config(config_path: Optional[Path]):
    from .utils import Config

    if config_path and config_path.exists():
        return Config.load(str(config_path))
    return Config()


def _resolve_budget(config, budget: Optional[int], difficulty: Optional[str]) -> int:
    from .utils import get_difficulty_budget

    if budget is not None:
        return budget
    if difficulty is not None:
        try:
            return get_difficulty_budget(difficulty)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--difficulty")
    return config.search.budget


@app.command()
def play(
    budget: Optional[int] = typer.Option(
        None, "--budget", "-b", help="Root visits per engine move"
    ),
    difficulty: Optional[str] = typer.Option(
        None, "--difficulty", "-d", help="easy, medium, hard or impossible"
    ),
    human_first: Optional[bool] = typer.Option(
        None, "--first/--second", help="Human plays first"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
) -> None:
    """Play against the engine in the terminal."""
    from .engine import Engine
    from .errors import EngineError, IllegalMoveError, InvalidArgumentError
    from .game import COLS, Outcome, Player
    from .utils import Logger, make_rng, print_board

    config = _load_config(config_path)
    if seed is not None:
        config.seed = seed
    config.ensure_dirs()

    if human_first is None:
        engine_side = Player[config.play.engine_side]
    else:
        engine_side = Player.B if human_first else Player.A
    human_side = engine_side.other

    logger = Logger(log_dir=config.log_dir, verbose=config.play.show_stats)
    engine = Engine(config.search, rng=make_rng(config.seed), logger=logger)

    console.print("\n[bold]Connect 4[/]")
    console.print(f"You are {human_side.name} ({'●' if human_side == Player.A else '○'}), "
                  f"AI is {engine_side.name}")
    console.print(f"Enter column number (0-{COLS - 1}) to play\n")

    try:
        first = engine.initialize(engine_side, _resolve_budget(config, budget, difficulty))
        if first is not None:
            console.print(f"AI played column {first}\n")

        while True:
            snapshot = engine.query_state()
            print_board(snapshot.board)
            if config.play.show_stats:
                console.print(
                    f"=> Confidence: {snapshot.win_rate:.3f} ({snapshot.visits} visits)"
                )

            if snapshot.outcome is not Outcome.ONGOING:
                if snapshot.outcome is Outcome.DRAW:
                    console.print("[yellow]Draw![/]")
                elif snapshot.outcome is Outcome.for_player(human_side):
                    console.print("[green]You win![/]")
                else:
                    console.print("[red]AI wins![/]")
                break

            try:
                col = int(typer.prompt(f"Your move (0-{COLS - 1})"))
            except ValueError:
                console.print(f"[red]Enter a number 0-{COLS - 1}[/]")
                continue

            try:
                console.print("[cyan]AI thinking...[/]")
                reply = engine.submit_opponent_move(col)
            except (InvalidArgumentError, IllegalMoveError) as e:
                console.print(f"[red]Invalid move, try again ({e})[/]")
                continue

            console.print(f"You played column {col}")
            if reply is not None:
                console.print(f"AI played column {reply}\n")
    except EngineError as e:
        console.print(f"[red]Engine failure: {e}[/]")
        raise typer.Exit(code=1)
    finally:
        engine.teardown()


@app.command()
def arena(
    games: Optional[int] = typer.Option(None, "--games", "-n", help="Number of games"),
    budget: Optional[int] = typer.Option(None, "--budget", "-b", help="Engine budget"),
    opponent_budget: Optional[int] = typer.Option(
        None, "--opponent-budget", help="Opponent engine budget (random player if omitted)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
) -> None:
    """Evaluate the engine in head-to-head matches."""
    from dataclasses import replace
    from .eval import Arena, should_accept
    from .utils import create_progress, make_rng, print_config

    config = _load_config(config_path)
    if seed is not None:
        config.seed = seed
    if budget is not None:
        config.search.budget = budget
    if games is not None:
        config.arena.num_games = games
    if opponent_budget is not None:
        config.arena.opponent_budget = opponent_budget

    print_config(config)
    evaluator = Arena(config.search, rng=make_rng(config.seed))

    wins, losses, draws = 0, 0, 0
    with create_progress() as progress:
        task = progress.add_task("Arena [W:0 L:0 D:0]", total=config.arena.num_games)

        def callback(n, result_str):
            nonlocal wins, losses, draws
            if result_str == "W":
                wins += 1
            elif result_str == "L":
                losses += 1
            else:
                draws += 1
            progress.update(
                task,
                advance=1,
                description=f"Arena [W:{wins} L:{losses} D:{draws}]"
            )

        if config.arena.opponent_budget is None:
            result = evaluator.evaluate_vs_random(config.arena.num_games, callback)
        else:
            opponent = replace(config.search, budget=config.arena.opponent_budget)
            result = evaluator.evaluate(opponent, config.arena.num_games, callback)

    console.print(f"\n[bold]Results (engine perspective):[/]")
    console.print(f"  Wins:   {result.wins}")
    console.print(f"  Losses: {result.losses}")
    console.print(f"  Draws:  {result.draws}")
    console.print(f"  Score:  {result.score*100:.1f}%")
    if config.arena.opponent_budget is not None:
        verdict = "ACCEPT" if should_accept(result) else "REJECT"
        console.print(
            f"  Budget {config.search.budget} vs {config.arena.opponent_budget}: {verdict}"
        )


@app.command()
def benchmark(
    budget: int = typer.Option(2000, "--budget", "-b", help="Engine budget"),
    moves: int = typer.Option(10, "--moves", "-n", help="Engine decisions to time"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Benchmark engine decision time against a random opponent."""
    import time
    from .engine import Engine
    from .errors import EngineError
    from .eval import RandomMover
    from .game import Player
    from .utils import SearchConfig, make_rng

    rng = make_rng(seed)
    console.print(f"[cyan]Timing up to {moves} decisions with budget {budget}...[/]")

    timed = 0
    total_visits = 0
    start = time.time()
    while timed < moves:
        engine = Engine(SearchConfig(budget=budget), rng=rng)
        opponent = RandomMover(rng)
        opponent.initialize(Player.B)
        try:
            col = engine.initialize(Player.A)
            while col is not None and timed < moves:
                m = engine.last_metrics
                timed += 1
                total_visits += m.root_visits
                console.print(
                    f"Move {timed}: column {m.column} ({m.source}, "
                    f"{m.iterations} iterations, {m.elapsed_sec*1000:.0f} ms)"
                )
                reply = opponent.submit_opponent_move(col)
                if reply is None:
                    break
                col = engine.submit_opponent_move(reply)
        except EngineError as e:
            console.print(f"[red]Engine failure: {e}[/]")
            raise typer.Exit(code=1)
        finally:
            engine.teardown()

    elapsed = time.time() - start
    console.print(f"\n[green]Total time: {elapsed:.2f}s[/]")
    console.print(f"[green]Decisions/sec: {timed/elapsed:.2f}[/]")
    console.print(f"[green]Root visits/sec: {total_visits/elapsed:.0f}[/]")


if __name__ == "__main__":
    app()
