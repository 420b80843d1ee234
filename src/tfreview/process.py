"""Terraform child process runner.

Streams merged stdout/stderr line by line, spots the approval prompt as soon
as it is printed (terraform leaves ``Enter a value: `` unterminated, so the
pending tail is checked too) and pauses line delivery until an answer is
relayed through :meth:`TerraformProcess.send_confirmation`.
"""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import os
from typing import TYPE_CHECKING, TypeAlias

from tfreview.ansi import strip_ansi
from tfreview.constants import APPROVAL_PROMPT_MARKERS
from tfreview.debug_log import log
from tfreview.limits import OUTPUT_READ_CHUNK, PROCESS_KILL_TIMEOUT

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from pathlib import Path

    from tfreview.config import TfReviewConfig

    OutputCallback: TypeAlias = Callable[[str], None]
    PromptCallback: TypeAlias = Callable[[list[str]], None]
    ExitCallback: TypeAlias = Callable[[int], None]


class ProcessStartError(RuntimeError):
    """The terraform executable could not be spawned."""

    def __init__(self, command: Sequence[str], detail: str) -> None:
        self.command = tuple(command)
        self.detail = detail
        super().__init__(f"Failed to start {' '.join(self.command)}: {detail}")


def build_apply_command(config: TfReviewConfig, targets: Iterable[str] | None = None) -> list[str]:
    """``terraform apply`` with ``-target=`` flags and configured extra args."""
    command = [config.terraform.bin, "apply"]
    command.extend(f"-target={target}" for target in targets or ())
    command.extend(config.terraform.apply_args)
    return command


def build_init_command(config: TfReviewConfig) -> list[str]:
    return [config.terraform.bin, "init"]


def is_prompt_line(line: str) -> bool:
    return any(marker in line for marker in APPROVAL_PROMPT_MARKERS)


class TerraformProcess:
    """Runs one terraform command and relays a single confirmation to it."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
        on_prompt: PromptCallback | None = None,
        on_exit: ExitCallback | None = None,
    ) -> None:
        if not command:
            raise ValueError("command must not be empty")
        self.command = list(command)
        self.cwd = str(cwd) if cwd is not None else None
        self.env = dict(env) if env else {}
        self.on_output = on_output
        self.on_prompt = on_prompt
        self.on_exit = on_exit

        self.output_lines: list[str] = []
        self.prompt_detected = False
        self._paused = False
        self._held: list[str] = []
        self._partial = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

        self._process: asyncio.subprocess.Process | None = None
        self._reader: asyncio.Task[None] | None = None
        self._return_code: int | None = None
        self._exited = asyncio.Event()

    @property
    def return_code(self) -> int | None:
        return self._return_code

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._return_code is None

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    async def start(self) -> None:
        """Spawn the process and begin streaming its output.

        Raises:
            ProcessStartError: the executable is missing or not runnable.
        """
        environment = os.environ.copy()
        environment.update(self.env)
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                cwd=self.cwd,
                env=environment,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            log.error("[Process] Spawn failed", command=self.command, error=str(exc))
            raise ProcessStartError(self.command, str(exc)) from exc

        log.info("[Process] Started", command=self.command, cwd=self.cwd, pid=self._process.pid)
        self._reader = asyncio.create_task(self._run())

    async def _run(self) -> None:
        process = self._process
        assert process is not None
        assert process.stdout is not None

        drained = False
        try:
            while True:
                data = await process.stdout.read(OUTPUT_READ_CHUNK)
                if not data:
                    break
                self._feed(self._decoder.decode(data))

            self._feed(self._decoder.decode(b"", final=True))
            if self._partial:
                self._record(self._partial)
                self._partial = ""

            if self._held:
                self.resume_output()
            drained = True
        finally:
            if not drained:
                # stdout is no longer drained; kill so wait() returns.
                log.error("[Process] Output reader stopped early", pid=process.pid)
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
            self._return_code = await process.wait()
            self._exited.set()
            log.info("[Process] Exited", return_code=self._return_code)
            if self.on_exit is not None:
                self.on_exit(self._return_code)

    def _feed(self, text: str) -> None:
        if not text:
            return
        *complete, self._partial = (self._partial + text).split("\n")
        for raw in complete:
            self._record(raw.removesuffix("\r"))

        # The final prompt has no trailing newline; don't wait for one.
        if self._partial and not self.prompt_detected and is_prompt_line(strip_ansi(self._partial)):
            self._record(self._partial)
            self._partial = ""

    def _record(self, raw: str) -> None:
        line = strip_ansi(raw)
        self.output_lines.append(line)

        if self._paused:
            self._held.append(line)
            return

        if not self.prompt_detected and is_prompt_line(line):
            self.prompt_detected = True
            self._paused = True
            self._held.append(line)
            log.info("[Process] Approval prompt detected", lines=len(self.output_lines))
            if self.on_prompt is not None:
                self.on_prompt(list(self.output_lines))
            return

        if self.on_output is not None:
            self.on_output(line)

    def resume_output(self) -> None:
        """Deliver lines held back while the prompt was pending."""
        self._paused = False
        held, self._held = self._held, []
        if self.on_output is not None:
            for line in held:
                self.on_output(line)

    def send_confirmation(self, token: str) -> bool:
        """Write ``token`` plus a newline to terraform's stdin.

        Returns:
            False when the process has exited or its stdin is closed.
        """
        process = self._process
        if process is None or self._return_code is not None:
            log.error("[Process] Terraform is no longer running", token=token)
            return False
        stdin = process.stdin
        if stdin is None or stdin.is_closing():
            log.error("[Process] Terraform stdin is closed", token=token)
            return False

        payload = token if token.endswith("\n") else f"{token}\n"
        try:
            stdin.write(payload.encode("utf-8"))
        except (BrokenPipeError, ConnectionResetError) as exc:
            log.error("[Process] Failed to send input", token=token, error=str(exc))
            return False

        log.debug("[Process] Sent input", token=token)
        self.resume_output()
        return True

    def kill(self) -> bool:
        """Kill the process. Returns False when there is nothing to kill."""
        if self._process is None or self._return_code is not None:
            return False
        try:
            self._process.kill()
        except ProcessLookupError:
            return False
        log.info("[Process] Killed", pid=self._process.pid)
        return True

    async def wait(self) -> int:
        """Wait for exit and for all output to be delivered."""
        if self._process is None:
            raise RuntimeError("process not started")
        await self._exited.wait()
        assert self._return_code is not None
        return self._return_code

    async def terminate(self) -> None:
        """Kill the process and wait briefly for it to go away."""
        if not self.kill():
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._exited.wait(), timeout=PROCESS_KILL_TIMEOUT)
