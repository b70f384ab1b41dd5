# src/credentials/resolver.py — v1
"""API credential resolution through an ordered fallback chain.

Order:
    1. value already resolved in this process
    2. environment variable (read at call time)
    3. secret-manager CLI (1Password `op` by default), run as a subprocess

The first success is kept for the lifetime of the resolver; clear() forces the
full chain to run again.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass

from docmeta.config.settings import Settings
from docmeta.core.errors import CredentialUnavailable

logger = logging.getLogger(__name__)


class SecretCommandError(Exception):
    """The secret-manager CLI step failed (spawn, exit code, timeout, output)."""


@dataclass(frozen=True)
class SecretCommand:
    """Invocation of the secret-manager CLI for one item field."""

    executable: str = "op"
    item: str = "Google AI Studio Key"
    vault: str = "Development"
    field_id: str = "notesPlain"
    timeout_s: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> SecretCommand:
        return cls(
            executable=settings.secret_cli,
            item=settings.secret_item,
            vault=settings.secret_vault,
            field_id=settings.secret_field_id,
            timeout_s=settings.secret_timeout_s,
        )

    @property
    def argv(self) -> list[str]:
        return [
            self.executable, "item", "get", self.item,
            "--vault", self.vault,
            "--format", "json",
        ]

    def describe(self) -> str:
        return f'{self.executable} item "{self.item}" in vault "{self.vault}"'


def extract_field_value(stdout: str, field_id: str) -> str:
    """Pull the trimmed value of the field with the given id from CLI JSON output.

    Raises:
        SecretCommandError: If the output is not JSON or the field is absent/empty.
    """
    try:
        item = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise SecretCommandError(f"failed to parse secret manager response: {e}") from e

    fields = item.get("fields") if isinstance(item, dict) else None
    for field in fields or []:
        if not isinstance(field, dict) or field.get("id") != field_id:
            continue
        value = field.get("value")
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise SecretCommandError(f"field {field_id!r} not found in secret manager item")


class CredentialResolver:
    """Resolve the remote service API key once per process."""

    def __init__(
        self,
        env_var: str = "GOOGLE_GENERATIVE_AI_API_KEY",
        secret_command: SecretCommand | None = None,
    ) -> None:
        self._env_var = env_var
        self._secret_command = secret_command or SecretCommand()
        self._cached: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialResolver:
        return cls(
            env_var=settings.credential_env_var,
            secret_command=SecretCommand.from_settings(settings),
        )

    @property
    def is_cached(self) -> bool:
        return bool(self._cached)

    async def resolve(self) -> str:
        """Return the API key, trying each source in order.

        Raises:
            CredentialUnavailable: If no source produced a key.
        """
        if self._cached:
            return self._cached

        attempts: list[str] = []

        env_value = os.environ.get(self._env_var, "").strip()
        if env_value:
            logger.debug("Using API key from environment variable %s", self._env_var)
            self._cached = env_value
            return env_value
        attempts.append(f"environment variable {self._env_var}: not set")

        cmd = self._secret_command
        logger.info("Fetching API key from %s...", cmd.describe())
        try:
            key = await self._run_secret_command()
        except SecretCommandError as e:
            logger.error("Secret manager lookup failed: %s", e)
            attempts.append(f"secret manager ({cmd.describe()}): {e}")
            raise CredentialUnavailable(attempts) from e

        self._cached = key
        return key

    def clear(self) -> None:
        """Forget the resolved key; the next resolve() runs the full chain."""
        self._cached = None

    async def _run_secret_command(self) -> str:
        cmd = self._secret_command
        try:
            # stdin is inherited so the CLI can prompt for unlock interactively
            proc = await asyncio.create_subprocess_exec(
                *cmd.argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SecretCommandError(f"failed to execute {cmd.executable}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=cmd.timeout_s
            )
        except asyncio.TimeoutError as e:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            raise SecretCommandError(
                f"{cmd.executable} did not finish within {cmd.timeout_s:g} seconds"
            ) from e

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise SecretCommandError(
                f"{cmd.executable} exited with code {proc.returncode}: {detail}"
            )

        return extract_field_value(
            stdout.decode("utf-8", errors="replace"), cmd.field_id
        )
