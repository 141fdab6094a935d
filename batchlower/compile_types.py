"""Compilation pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompileConfig:
    """Groups compilation options."""

    split: bool = True
    prologue: bool = True
    line_ending: str = "\n"


@dataclass
class CompileStats:
    """Timing and size statistics for each pipeline stage."""

    source_bytes: int = 0
    function_count: int = 0
    statement_count: int = 0

    # Stage timings (seconds)
    load_time: float = 0.0
    symtable_time: float = 0.0
    split_time: float = 0.0
    lower_time: float = 0.0
    render_time: float = 0.0
    total_time: float = 0.0

    # Output sizes
    target_statement_count: int = 0
    script_lines: int = 0

    def report(self) -> str:
        lines = [
            "═══ Compilation Statistics ═══",
            f"  Source: {self.source_bytes} bytes, {self.statement_count} top-level statements, {self.function_count} functions",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]

        stages = [
            ("Load AST", self.load_time, ""),
            ("Symbol table", self.symtable_time, ""),
            ("Split", self.split_time, ""),
            (
                "Lower",
                self.lower_time,
                f"{self.target_statement_count} target statements",
            ),
            ("Render", self.render_time, f"{self.script_lines} lines"),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        return "\n".join(lines)
