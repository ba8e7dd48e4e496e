from __future__ import annotations

from typing import List

from core.logging.logger import get_logger
from application.services import ReconcileReport, present
from presentation.runtime import open_runtime

_GREEN = "\033[92m"
_YELLOW = "\033[93m"
_RESET = "\033[0m"


class RefreshCommand:
    """Reconcile every tracked player once and print what changed."""

    def __init__(self) -> None:
        self._log = get_logger(__name__, service="refresh-cli")

    async def run(self) -> int:
        async with open_runtime() as runtime:
            print(f"\nRefreshing {len(runtime.roster.roster)} players...\n", flush=True)
            reports = await runtime.roster.refresh_all()
            self._print_table(reports)
        failed = [r for r in reports if not r.ok]
        if failed:
            self._log.warning(lambda: f"{len(failed)} player(s) refreshed with errors")
        return 1 if any(r.listing_failed for r in reports) else 0

    def _print_table(self, reports: List[ReconcileReport]) -> None:
        print(f"{'PLAYER':<12} {'GAMES':>6} {'WINRATE':>8} {'MAIN':<14} {'RANK':<26} NEW")
        print("─" * 80)
        for report in reports:
            s = present(report.aggregate)
            color = _GREEN if report.ok else _YELLOW
            new = f"+{report.counted}/{report.new_match_ids}"
            print(
                f"{color}{s.puuid[:10] + '..':<12} {s.games_played:>6} {s.winrate:>8} "
                f"{s.most_played_champion:<14} {s.rank:<26} {new}{_RESET}",
                flush=True,
            )
            for err in report.errors:
                print(f"    {_YELLOW}! {err}{_RESET}", flush=True)
