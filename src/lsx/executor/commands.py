"""Executor command vocabulary and reserved exit codes.

These values form the process-boundary protocol between a storage client
and an executor binary. They are fixed: changing any of them breaks every
executor built against this contract.
"""

from enum import Enum, IntEnum


class Command(str, Enum):
    """Commands an executor binary recognizes."""

    INSTANCE_ID = "instanceID"  # Print the local instance ID
    LOCAL_DEVICES = "localDevices"  # Print the local devices map
    NEXT_DEVICE = "nextDevice"  # Print the next available device
    WAIT = "wait"  # Block until an attach token appears in localDevices
    SUPPORTED = "supported"  # Print the supported operations mask
    MOUNT = "mount"  # Mount a device to a file system path
    UMOUNT = "umount"  # Unmount a mounted file system

    def __str__(self) -> str:
        return self.value


class ExecutorExitCode(IntEnum):
    """Exit codes with a reserved meaning.

    Any other non-zero exit code is an implementation-defined hard failure.
    """

    SUCCESS = 0

    # The function is not implemented for the executor on the current host
    NOT_IMPLEMENTED = 2

    # The function timed out
    TIMED_OUT = 255

    # Hard failure used by the lsx command line itself
    FAILED = 1
