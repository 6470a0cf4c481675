"""Async command execution utilities."""

import asyncio
import logging
import shlex
from pathlib import Path
from typing import Tuple

DEFAULT_TIMEOUT = 30
FETCH_TIMEOUT = 120
INSTALL_TIMEOUT = 600

_logging = logging.getLogger(__name__)


async def run_command_async(
    command: str,
    timeout: int = DEFAULT_TIMEOUT,
    cwd: Path | None = None,
) -> Tuple[str, int]:
    """Run a command asynchronously and return output and return code.

    stderr is appended to the output when the command fails so callers can
    surface it to the user.
    """
    process = None
    try:
        _logging.debug(f"Running command: {command}")
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
            output = stdout.decode().strip()
            returncode = process.returncode if process.returncode is not None else 1
            if stderr:
                _logging.debug(f"stderr: {stderr.decode().strip()}")
                if returncode != 0:
                    output = "\n".join(
                        part for part in (output, stderr.decode().strip()) if part
                    )
            return output, returncode
        except asyncio.TimeoutError:
            process.kill()
            _ = await process.wait()
            _logging.error(f"Command timed out after {timeout} seconds: {command}")
            return f"Command timed out after {timeout} seconds", 1
    except Exception as e:
        _logging.error(
            f"Command execution failed: {type(e).__name__}: {e} | Command: {command}"
        )
        return f"Error: {str(e)}", 1
    finally:
        if process:
            transport = getattr(process, "_transport", None)
            if transport:
                transport.close()


async def fetch_url_content(url: str, timeout: int = FETCH_TIMEOUT) -> tuple[str | None, str]:
    """Fetch content from a URL using curl."""
    output, returncode = await run_command_async(
        f"curl -s -f -L {shlex.quote(url)}", timeout=timeout
    )
    if returncode != 0:
        return None, f"Failed to fetch URL {url}: {output or f'exit code {returncode}'}"
    return output, "success"
