import logging
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel
from pytest_mock import MockerFixture

from admintool.cli.main import main as admin_main


def strip_ansi(text: str) -> str:
    """Remove ANSI color codes from text."""
    return re.sub(r'\x1b\[[0-9;]*m', '', text)


class Result(BaseModel):
    returncode: int
    stdout: str
    stderr: str
    log: str | None = None

    @property
    def all_output(self) -> str:
        """Combine stdout, stderr, and log for unified output checking."""
        return (self.stdout or '') + (self.stderr or '') + (self.log or '')


@dataclass
class RunCommandContext:
    cli_name: str
    main_func: Callable[[], int]
    args: list[str]
    capsys: pytest.CaptureFixture
    caplog: pytest.LogCaptureFixture
    mocker: MockerFixture


def _run_command(ctx: RunCommandContext) -> Result:
    """Helper for CLI main function execution with pytest fixtures."""
    ctx.mocker.patch.object(sys, 'argv', [ctx.cli_name, *ctx.args])
    ctx.caplog.set_level(logging.DEBUG)
    exit_code = ctx.main_func()
    captured = ctx.capsys.readouterr()
    return Result(
        returncode=exit_code,
        stdout=strip_ansi(captured.out),
        stderr=strip_ansi(captured.err),
        log=strip_ansi(ctx.caplog.text),
    )


CliCommand = Callable[[list[str]], Result]


@pytest.fixture
def run_admin(
    capsys: pytest.CaptureFixture,
    caplog: pytest.LogCaptureFixture,
    mocker: MockerFixture,
) -> CliCommand:
    def _run(args: list[str]) -> Result:
        ctx = RunCommandContext(
            cli_name='pulsar-admin',
            main_func=admin_main,
            args=args,
            capsys=capsys,
            caplog=caplog,
            mocker=mocker,
        )
        return _run_command(ctx)

    return _run


@pytest.fixture
def client_conf(tmp_path: Path) -> Path:
    """A properties file pointing at an unreachable local broker."""
    path = tmp_path / 'client.conf'
    path.write_text(
        '# pulsar client settings\n'
        'webServiceUrl=http://127.0.0.1:9/\n'
        'tlsAllowInsecureConnection=false\n',
    )
    return path


def assert_contains_all(output: str, snippets: list[str], context: str = ''):
    missing = [s for s in snippets if s not in output]
    if missing:
        pytest.fail(
            f'Missing expected snippet(s) in {context}: {missing}\nActual output:\n{output}',
        )
