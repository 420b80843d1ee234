"""Test doubles for the confirmation relay and the terraform process."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class FakeRelay:
    """Records relayed tokens; ``deliver=False`` simulates a dead process."""

    def __init__(self, deliver: bool = True) -> None:
        self.deliver = deliver
        self.sent: list[str] = []

    def send_confirmation(self, token: str) -> bool:
        self.sent.append(token)
        return self.deliver


class FakeTerraformProcess(FakeRelay):
    """Stands in for TerraformProcess inside the app.

    Nothing is spawned. Tests drive the callbacks through ``emit``,
    ``prompt`` and ``exit``.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        cwd: object = None,
        env: object = None,
        on_output: Callable[[str], None] | None = None,
        on_prompt: Callable[[list[str]], None] | None = None,
        on_exit: Callable[[int], None] | None = None,
    ) -> None:
        super().__init__()
        self.command = list(command)
        self.cwd = cwd
        self.env = env
        self.on_output = on_output
        self.on_prompt = on_prompt
        self.on_exit = on_exit
        self.output_lines: list[str] = []
        self.started = False
        self.terminated = False
        self.return_code: int | None = None

    @property
    def is_running(self) -> bool:
        return self.started and self.return_code is None

    async def start(self) -> None:
        self.started = True

    async def terminate(self) -> None:
        self.terminated = True
        self.return_code = -9

    def emit(self, lines: Sequence[str]) -> None:
        for line in lines:
            self.output_lines.append(line)
            if self.on_output is not None:
                self.on_output(line)

    def prompt(self, lines: Sequence[str]) -> None:
        self.output_lines.extend(lines)
        if self.on_prompt is not None:
            self.on_prompt(list(self.output_lines))

    def exit(self, return_code: int) -> None:
        self.return_code = return_code
        if self.on_exit is not None:
            self.on_exit(return_code)


def fake_process_factory(created: list[FakeTerraformProcess]) -> Callable[..., FakeTerraformProcess]:
    """Factory for TfReviewApp that remembers every process it builds."""

    def _factory(command: Sequence[str], **kwargs) -> FakeTerraformProcess:
        process = FakeTerraformProcess(command, **kwargs)
        created.append(process)
        return process

    return _factory
