"""Tracing module: logs puzzle engine steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single recorded engine event."""

    timestamp: float
    step_number: int
    action_type: str  # 'deduce', 'backtrack', 'generation_attempt', 'cell_removed', 'cell_kept', 'solution_found'
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[str] = None
    rule: Optional[str] = None
    weight: Optional[int] = None
    depth: Optional[int] = None  # backtracking depth (generator rows placed)
    reason: Optional[str] = None


class Tracer:
    """Records engine steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_deduction(self, row: int, col: int, value: Any, rule: str, weight: int):
        """Log a cell placed by a deduction rule."""
        self._record('deduce', row=row, col=col, value=_plain(value), rule=rule, weight=weight)

    def log_backtrack(self, depth: int, reason: str = "No valid row pattern"):
        """Log a generator backtrack out of row `depth`."""
        self._record('backtrack', depth=depth, reason=reason)

    def log_generation_attempt(self, size: int, attempt: int, reason: str = ""):
        """Log one attempt at building a solution or puzzle."""
        self._record('generation_attempt', depth=attempt, reason=reason or f"size {size}")

    def log_cell_removed(self, row: int, col: int):
        """Log a given cell the minimizer blanked."""
        self._record('cell_removed', row=row, col=col)

    def log_cell_kept(self, row: int, col: int, reason: str = ""):
        """Log a cell the minimizer had to restore."""
        self._record('cell_kept', row=row, col=col, reason=reason)

    def log_solution_found(self, difficulty: Optional[int] = None, reason: str = ""):
        """Log when a board is fully solved."""
        self._record('solution_found', weight=difficulty, reason=reason)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'row', 'col', 'value',
            'rule', 'weight', 'depth', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        rule_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1
            if step.action_type == 'deduce' and step.rule:
                rule_counts[step.rule] = rule_counts.get(step.rule, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'rule_counts': rule_counts,
            'num_deductions': action_counts.get('deduce', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
        }


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
