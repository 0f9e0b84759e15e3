"""Tests for the interactive REPL loop."""

from unittest.mock import AsyncMock, patch
import pytest
from nbtoken.lib.repl import repl_do
from nbtoken.models.dataModel import InputResult


@pytest.mark.asyncio
async def test_repl_runs_until_exit():
    inputs = [
        InputResult(text="", continue_loop=True),
        InputResult(text="[site:name]", continue_loop=True),
        InputResult(text="/exit", continue_loop=True),
    ]
    with (
        patch("nbtoken.lib.repl.input_get", new_callable=AsyncMock) as mock_get,
        patch("nbtoken.lib.repl.input_handle", new_callable=AsyncMock) as mock_handle,
    ):
        mock_get.side_effect = inputs
        mock_handle.side_effect = [True, False]
        await repl_do()

    assert mock_handle.await_count == 2
    mock_handle.assert_any_await(text="[site:name]", non_interactive=False)
    mock_handle.assert_any_await(text="/exit", non_interactive=False)


@pytest.mark.asyncio
async def test_repl_stops_on_interrupted_prompt(capsys):
    with (
        patch("nbtoken.lib.repl.input_get", new_callable=AsyncMock) as mock_get,
        patch("nbtoken.lib.repl.input_handle", new_callable=AsyncMock) as mock_handle,
    ):
        mock_get.return_value = InputResult(
            text="", continue_loop=False, error="Interrupt received"
        )
        await repl_do()

    mock_handle.assert_not_awaited()
    assert "REPL session terminated" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_repl_stops_on_critical_error(capsys):
    with (
        patch("nbtoken.lib.repl.input_get", new_callable=AsyncMock) as mock_get,
        patch("nbtoken.lib.repl.input_handle", new_callable=AsyncMock) as mock_handle,
    ):
        mock_get.return_value = InputResult(text="x", continue_loop=True)
        mock_handle.side_effect = RuntimeError("broken")
        await repl_do()

    assert "Fatal error: broken" in capsys.readouterr().out
