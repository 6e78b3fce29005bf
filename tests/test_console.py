"""Tests for the hotseat console frontend and its command glue."""

import asyncio
import io

import pytest

from salvo.battleship import Board, Orientation
from salvo.client import ConsoleGame
from salvo.frontend import Choice, ConsoleFrontend
from salvo.io_utils import grid_rows
from salvo.session import Phase


async def until(predicate) -> None:
    while not predicate():
        await asyncio.sleep(0)


def test_grid_rows_masks_afloat_ships_only():
    board = Board(3, name="P")
    board.place_ship(0, 0, 1, Orientation.N)
    ship = board.place_ship(2, 2, 1, Orientation.N)
    board.cell(1, 1).fire()
    assert grid_rows(board) == ["  A B C", "1 S . .", "2 . o .", "3 . . S"]

    assert grid_rows(board, mask=True) == ["  A B C", "1 . . .", "2 . o .", "3 . . ."]
    ship.cells[0].fire()
    assert grid_rows(board, mask=True)[3] == "3 . . X"


def test_grid_rows_draws_ghost_on_empty_water():
    board = Board(3)
    ghost = board.valid_placement_cells(0, 2, 2, Orientation.E)
    assert grid_rows(board, ghost=ghost)[3] == "3 + + ."


def test_render_board_prints_only_changes():
    out = io.StringIO()
    fe = ConsoleFrontend(out)
    board = Board(2, name="Player 1")
    fe.render_board(board, False)
    first = out.getvalue()
    fe.render_board(board, False)
    assert out.getvalue() == first
    board.cell(0, 0).fire()
    fe.render_board(board, False)
    assert out.getvalue().count("Player 1") == 2


@pytest.mark.timeout(5)
async def test_confirm_prompt_is_single_flight():
    fe = ConsoleFrontend(io.StringIO())
    assert fe.feed("y") is False

    first = asyncio.create_task(fe.show_confirm("Next turn", "hand over"))
    await until(lambda: fe.prompt_open)
    assert await fe.show_confirm("Next turn", "again") is False

    assert fe.feed("Yes\n") is True
    assert await first is True
    assert not fe.prompt_open


@pytest.mark.timeout(5)
async def test_choice_prompt_retries_until_in_range():
    out = io.StringIO()
    fe = ConsoleFrontend(out)
    task = asyncio.create_task(fe.show_choice(1, 5))
    for answer in ("lots", "9", "3"):
        await until(lambda: fe.prompt_open)
        fe.feed(answer)
        await asyncio.sleep(0)
    assert await task == Choice(ok=True, value=3)
    assert "ERR" in out.getvalue()


@pytest.mark.timeout(5)
async def test_blank_choice_backs_out():
    fe = ConsoleFrontend(io.StringIO())
    task = asyncio.create_task(fe.show_choice(1, 5))
    await until(lambda: fe.prompt_open)
    fe.feed("\n")
    assert await task == Choice(ok=False)


@pytest.mark.timeout(5)
async def test_console_game_plays_a_one_ship_match(settings):
    out = io.StringIO()
    game = ConsoleGame(settings, ConsoleFrontend(out))
    session, fe = game.session, game.frontend

    start = asyncio.create_task(session.start())
    await until(lambda: fe.prompt_open)
    game.dispatch("1\n")
    assert await start is True

    for coord in ("A1", "C3"):
        game.dispatch(f"PLACE {coord}\n")
        await until(lambda: fe.prompt_open)
        game.dispatch("y\n")
        await until(lambda: not session.is_resolving_turn)
    assert session.phase is Phase.PLAY

    game.dispatch("FIRE J10\n")  # miss
    await until(lambda: fe.prompt_open)
    game.dispatch("y\n")
    await until(lambda: session.current_player_id == 2)

    game.dispatch("FIRE A1\n")  # sinks player 1's only ship
    await until(lambda: fe.winner is not None)
    assert session.phase is Phase.GAME_OVER
    assert fe.winner == 2
    assert "Player 2 wins!" in out.getvalue()


async def test_console_game_reports_bad_commands(settings):
    out = io.StringIO()
    game = ConsoleGame(settings, ConsoleFrontend(out))
    game.dispatch("FIRE Z99\n")
    game.dispatch("DANCE\n")
    assert out.getvalue().count("[danger] ERR") == 2


async def test_console_game_rotate_and_delete(settings):
    game = ConsoleGame(settings, ConsoleFrontend(io.StringIO()))
    session, fe = game.session, game.frontend
    fe_choice = asyncio.create_task(session.start())
    await until(lambda: fe.prompt_open)
    game.dispatch("2")
    await fe_choice

    game.dispatch("ROTATE")
    assert session.current_player.orientation is Orientation.E
    game.dispatch("HOVER B2")
    assert [(c.col, c.row) for c in session.ghost_cells] == [(1, 1)]
    game.dispatch("PLACE B2")
    await until(lambda: fe.prompt_open)
    game.dispatch("y")
    await until(lambda: not session.is_resolving_turn)
    assert session.current_player_id == 2

    game.dispatch("PLACE E5")
    await until(lambda: fe.prompt_open)
    game.dispatch("y")
    await until(lambda: not session.is_resolving_turn)
    assert session.current_player_id == 1

    game.dispatch("DELETE B2")
    assert session.players[1].ships == {}


async def test_quit_command_sets_flag(settings):
    game = ConsoleGame(settings, ConsoleFrontend(io.StringIO()))
    game.dispatch("quit")
    assert game.quit is True
