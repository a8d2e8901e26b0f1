# Welcome to
#
#             ____                ____              _
#            | __ )  ___   __ _  / ___| _ __   __ _| | _____
#            |  _ \ / _ \ / _` | \___ \| '_ \ / _` | |/ / _ \
#            | |_) | (_) | (_| |  ___) | | | | (_| |   <  __/
#            |____/ \___/ \__,_| |____/|_| |_|\__,_|_|\_\___|
#
# Request handlers for the BoaSnake engine.
# For more info see docs.battlesnake.com

import functools
import time
import typing
from concurrent.futures import Executor

from boa_snake.board import Board, Snake
from boa_snake.logic import FALLBACK_MOVE, create_worker_pool, score_moves, select_move

DEFAULT_TIMEOUT_MS = 500


# info is called when you create your Battlesnake on play.battlesnake.com
# and controls your Battlesnake's appearance
def info() -> typing.Dict:
    print("INFO")

    return {
        "apiversion": "1",
        "author": "ponchoalv",
        "color": "#888888",
        "head": "default",
        "tail": "default",
    }


# start is called when your Battlesnake begins a game
def start(game_state: typing.Optional[typing.Dict] = None):
    print("GAME START")


# end is called when your Battlesnake finishes a game
def end(game_state: typing.Optional[typing.Dict] = None):
    print("GAME OVER\n")


# move is called on every turn and returns your next move
# Valid moves are "up", "down", "left", or "right"
def move(game_state: typing.Dict, executor: typing.Optional[Executor] = None) -> typing.Dict:
    start_time = time.time()

    turn = game_state.get("turn", 0)
    timeout_ms = game_state.get("game", {}).get("timeout", DEFAULT_TIMEOUT_MS)
    board = Board.from_dict(game_state["board"])
    you = Snake.from_dict(game_state["you"])

    evaluations = score_moves(board, you, timeout_ms, executor=executor, start_time=start_time)
    best = select_move(evaluations)

    if best is None:
        print(f"MOVE {turn}: No safe moves detected! Going {FALLBACK_MOVE}")
        return {"move": FALLBACK_MOVE}

    nodes = sum(e.nodes_evaluated for e in evaluations)
    depth = max(e.depth_reached for e in evaluations)
    print(f"MOVE {turn}: {best.move} | Score: {best.score} | "
          f"Nodes: {nodes} | Depth: {depth} | Health: {you.health}")

    return {"move": best.move}


# Start server when `python -m boa_snake.main` is run
if __name__ == "__main__":
    from boa_snake.server import run_server

    with create_worker_pool() as pool:
        run_server({"info": info, "start": start, "move": functools.partial(move, executor=pool), "end": end})
