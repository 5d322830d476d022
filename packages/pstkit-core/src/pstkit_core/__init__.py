"""pstkit-core -- Shared primitives for the pstkit framework.

Re-exports all public types: errors and archive accessor protocols.
"""

from pstkit_core.errors import (
    ArchiveException,
    BaseExportError,
    CoreErrorCode,
    PstkitException,
)
from pstkit_core.protocols import (
    Archive,
    ArchiveAttachment,
    ArchiveFolder,
    ArchiveMessage,
)

__all__ = [
    # Errors
    "CoreErrorCode",
    "BaseExportError",
    "PstkitException",
    "ArchiveException",
    # Protocols
    "Archive",
    "ArchiveFolder",
    "ArchiveMessage",
    "ArchiveAttachment",
]
