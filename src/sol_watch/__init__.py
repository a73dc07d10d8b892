"""sol-watch — incremental Solana wallet activity watcher."""

from __future__ import annotations

__version__ = "0.1.0"
