import asyncio
from typing import Sequence


async def run_command(args: Sequence[str], timeout: float = 5.0) -> str:
    """
    Run a command without blocking the event loop and return its stdout.

    Raises RuntimeError if the binary is missing, the command times out or it
    exits with a non-zero return code.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise RuntimeError(f"{args[0]} binary not found on host system") from exc

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        process.kill()
        await process.wait()
        raise RuntimeError(f"{args[0]} timed out after {timeout:g}s") from exc

    if process.returncode != 0:
        message = stderr.decode(errors="replace").strip()
        raise RuntimeError(
            f"{args[0]} failed with return code {process.returncode}: {message}"
        )

    return stdout.decode(errors="replace")
