"""Bounded polling until an attached device becomes visible.

wait_for_device() repeatedly enumerates local devices until the attach token
shows up or the timeout elapses. Outcomes:

- Found: returns (True, snapshot)
- Timed out: returns (False, last snapshot); this is not an error
- Enumeration failure: the exception propagates immediately, no retries
- Context done: raises the context error without waiting out the timeout
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from lsx.core.context import Context
from lsx.domain import LocalDevices, LocalDevicesOpts, WaitForDeviceOpts

logger = logging.getLogger(__name__)

# Default pause between polls, in seconds
DEFAULT_POLL_INTERVAL = 0.1

LocalDevicesFunc = Callable[[Context, LocalDevicesOpts], LocalDevices]


def wait_for_device(
    ctx: Context,
    local_devices: LocalDevicesFunc,
    opts: WaitForDeviceOpts,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> tuple[bool, LocalDevices]:
    """Block until opts.token appears in a local devices snapshot.

    The effective deadline is the earlier of now + opts.timeout and the
    context deadline. A zero timeout performs exactly one poll.

    Args:
        ctx: Call context; cancellation interrupts the inter-poll wait.
        local_devices: Enumeration function, usually an executor's
            local_devices method.
        opts: Token, timeout, scan type and executor options.
        poll_interval: Seconds to pause between polls. Must be positive
            and finite.

    Returns:
        Tuple of (matched, snapshot).

    Raises:
        ValueError: If poll_interval is not a positive finite number.
        ContextCancelledError: If the context is cancelled.
        ContextDeadlineExceededError: If the context deadline passes first.
        Exception: Any error raised by local_devices, unchanged.
    """
    if not (math.isfinite(poll_interval) and poll_interval > 0):
        raise ValueError(f"poll_interval must be positive, got {poll_interval}")

    deadline = time.monotonic() + opts.timeout
    ld_opts = opts.local_devices_opts
    attempts = 0

    ctx.raise_if_done()

    while True:
        attempts += 1
        devices = local_devices(ctx, ld_opts)

        if devices.matches(opts.token):
            logger.debug(
                "Device for token %s found after %d attempt(s)",
                opts.token,
                attempts,
                extra={"token": opts.token, "attempts": attempts},
            )
            return True, devices

        ctx.raise_if_done()

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug(
                "Timed out waiting for token %s after %d attempt(s)",
                opts.token,
                attempts,
                extra={"token": opts.token, "attempts": attempts},
            )
            return False, devices

        if ctx.wait(min(poll_interval, remaining)):
            ctx.raise_if_done()
