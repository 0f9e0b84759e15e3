"""
Tests for input processing functionality.

Tests cover:
- Placeholder replacement of text and JSON input
- Command processing
- Mode detection
- Input handling
"""

import json
import sys
from unittest.mock import MagicMock, patch
import pytest
from nbtoken.lib.input import (
    input_handle,
    input_process,
    input_readStdin,
    mode_detect,
)
from nbtoken.lib.session import TokenSession, session_set
from nbtoken.models.dataModel import InputMode, ProcessResult, TokenConfig


@pytest.fixture(autouse=True)
def session():
    session = TokenSession.create(TokenConfig(defaults={"site": {"name": "Acme"}}))
    session.store.reset()
    session_set(session)
    yield session
    session_set(None)


@pytest.mark.asyncio
async def test_mode_detect_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", MagicMock(isatty=lambda: False))
    mode = await mode_detect()
    assert mode == InputMode(has_stdin=True, ask_string=None, use_repl=False)


@pytest.mark.asyncio
async def test_mode_detect_ask(monkeypatch):
    monkeypatch.setattr(sys, "stdin", MagicMock(isatty=lambda: True))
    mode = await mode_detect(ask_string="[site:name]")
    assert mode == InputMode(has_stdin=False, ask_string="[site:name]", use_repl=False)


@pytest.mark.asyncio
async def test_mode_detect_repl(monkeypatch):
    monkeypatch.setattr(sys, "stdin", MagicMock(isatty=lambda: True))
    mode = await mode_detect()
    assert mode.use_repl


@pytest.mark.asyncio
async def test_read_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", MagicMock(read=lambda: "hello [site:name]\n"))
    assert await input_readStdin() == "hello [site:name]"


@pytest.mark.asyncio
async def test_read_stdin_empty(monkeypatch):
    monkeypatch.setattr(sys, "stdin", MagicMock(read=lambda: "  \n"))
    with pytest.raises(IOError, match="Empty input"):
        await input_readStdin()


@pytest.mark.asyncio
async def test_text_replacement():
    result = await input_process("Welcome to [site:name]")
    assert result.success
    assert not result.is_command
    assert result.text == "Welcome to Acme"


@pytest.mark.asyncio
async def test_json_replacement():
    document = json.dumps({"title": "[site:name]", "items": ["[site:name]!", None]})
    result = await input_process(document, as_json=True)
    assert result.success
    assert json.loads(result.text) == {"title": "Acme", "items": ["Acme!", None]}


@pytest.mark.asyncio
async def test_json_replacement_keeps_scalar_types():
    document = json.dumps({"title": "[site:name]", "enabled": True, "n": 2, "off": False})
    result = await input_process(document, as_json=True)
    assert result.success
    assert json.loads(result.text) == {"title": "Acme", "enabled": True, "n": 2, "off": False}


@pytest.mark.asyncio
async def test_json_replacement_invalid():
    result = await input_process("{broken", as_json=True)
    assert not result.success
    assert "not valid JSON" in result.error
    assert result.exit_code == 1


@pytest.mark.asyncio
@patch("nbtoken.lib.input.command_process")
async def test_command_processing(mock_cmd_process):
    mock_cmd_process.return_value = True
    result = await input_process("/token get site:name")
    assert result.success
    assert result.is_command
    assert not result.should_exit
    mock_cmd_process.assert_called_once_with("/token get site:name")


@pytest.mark.asyncio
async def test_exit_command():
    result = await input_process("/exit")
    assert result.is_command
    assert result.should_exit


@pytest.mark.asyncio
async def test_escaped_slash_is_replaced_text():
    result = await input_process(r"\/path/[site:name]")
    assert not result.is_command
    assert result.text == "/path/Acme"


@pytest.mark.asyncio
async def test_command_changes_session(session):
    await input_process("/token set site:name Beta")
    result = await input_process("[site:name]")
    assert result.text == "Beta"


@pytest.mark.asyncio
async def test_input_handle_noninteractive_exits(capsys):
    with patch("nbtoken.lib.input.input_process") as mock_process:
        mock_process.return_value = ProcessResult(
            text="Replaced", is_command=False, should_exit=False
        )
        with pytest.raises(SystemExit) as exc:
            await input_handle("[x]", non_interactive=True)
    assert exc.value.code == 0
    assert "Replaced" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_input_handle_noninteractive_error_exit_code():
    with pytest.raises(SystemExit) as exc:
        await input_handle("{broken", non_interactive=True, as_json=True)
    assert exc.value.code == 1


@pytest.mark.asyncio
async def test_input_handle_interactive_continues():
    assert await input_handle("[site:name]") is True
    assert await input_handle("{broken", as_json=True) is True
    assert await input_handle("/exit") is False
