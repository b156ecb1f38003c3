from __future__ import annotations

from stocksync.ui.cli import run

run()
