"""One in-progress feasibility document with every calculation module attached."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from feasibility.calculation import CalculationModule
from feasibility.capex import CapexModule
from feasibility.export_logistics import ExportLogisticsModule
from feasibility.financing import LoanAmortizationModule
from feasibility.overheads import OverheadsModule
from feasibility.paths import Path, format_path, parse_path
from feasibility.payroll import PayrollModule
from feasibility.product_costing import ProductCostingModule
from feasibility.profit_loss import ProfitLossModule
from feasibility.runtime_logging import append_runtime_event
from feasibility.store import ConvergenceError, RecordStore
from feasibility.working_capital import WorkingCapitalModule
from feasibility.yield_loss import YieldLossModule


MODULE_ORDER = (
    YieldLossModule,
    ProductCostingModule,
    ExportLogisticsModule,
    CapexModule,
    PayrollModule,
    OverheadsModule,
    ProfitLossModule,
    WorkingCapitalModule,
    LoanAmortizationModule,
)


def build_modules() -> list[CalculationModule]:
    return [module_cls() for module_cls in MODULE_ORDER]


def derived_paths(record: dict) -> list[str]:
    """Every derived path some module owns for the given record."""
    out: list[str] = []
    for module in build_modules():
        out.extend(format_path(p) for p in module.derived_paths(record))
    return out


@dataclass
class PassResult:
    trigger: Optional[str]
    commits: int
    derived_written: list[str] = field(default_factory=list)

    @property
    def is_bulk_load(self) -> bool:
        return self.trigger is None


class FeasibilitySession:
    def __init__(self, record: dict | None = None, *, log_events: bool = True, max_depth: int | None = None):
        self.store = RecordStore(record) if max_depth is None else RecordStore(record, max_depth=max_depth)
        self.log_events = log_events
        self.modules = build_modules()
        for module in self.modules:
            module.attach(self.store)

    def _log(self, level: str, event: str, message: str, context: dict | None = None, exc=None) -> None:
        if self.log_events or exc is not None:
            append_runtime_event(level, event, message, context=context, exc=exc)

    def _run(self, trigger: Path | None, action) -> PassResult:
        start = len(self.store.commit_log)
        try:
            action()
        except ConvergenceError as exc:
            self._log(
                "ERROR",
                "convergence_failure",
                str(exc),
                context={"trigger": format_path(trigger) or None, "kind": exc.kind, "limit": exc.depth},
                exc=exc,
            )
            raise
        commits = self.store.commit_log[start:]
        written: list[str] = []
        for commit in commits[1:]:
            text = format_path(commit.path)
            if text not in written:
                written.append(text)
        return PassResult(trigger=format_path(trigger) or None, commits=len(commits), derived_written=written)

    def load(self, record: dict) -> PassResult:
        """Replace the whole record and let every module settle."""
        result = self._run(None, lambda: self.store.load(record))
        self._log(
            "INFO",
            "bulk_load",
            "Record loaded.",
            context={"commits": result.commits, "derived_written": len(result.derived_written)},
        )
        return result

    def edit(self, path: str | Path, value: Any) -> PassResult:
        parsed = parse_path(path)
        result = self._run(parsed, lambda: self.store.set(parsed, value))
        self._log(
            "INFO",
            "field_edit",
            f"Edited {result.trigger}.",
            context={"commits": result.commits, "derived_written": result.derived_written},
        )
        return result

    def get(self, path: str | Path, default: Any = None) -> Any:
        return self.store.get(path, default)

    def snapshot(self) -> dict:
        return self.store.get_all()

    def close(self) -> None:
        for module in self.modules:
            module.detach()
