"""Tree formatter for rich terminal output."""

from collections import defaultdict
from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ocd.core.models import AnalysisMode, AnalysisResult, CodeEndpoint, OrphanFinding
from ocd.output.formatters.protocols import BaseFormatter

console = Console()


class TreeFormatter(BaseFormatter):
    """Format results as a rich tree for terminal output."""

    def format(self, result: AnalysisResult) -> str:
        """Format analysis results as a rich tree."""
        if not result.findings:
            return "✅ No orphaned code detected!"

        # Print tree directly to console
        self._print_tree(result)
        return ""  # Return empty string since we printed directly

    def _print_tree(self, result: AnalysisResult) -> None:
        """Print the tree structure to console."""
        findings = result.findings

        findings_by_file: dict[str, list[OrphanFinding]] = defaultdict(list)
        for finding in findings:
            findings_by_file[finding.item.file].append(finding)

        root_tree = Tree(
            f"🔍 Orphaned code by file (total {len(findings)} items)",
            guide_style="dim",
        )

        dir_nodes: dict[tuple[str, ...], Tree] = {(): root_tree}

        for file_path in sorted(findings_by_file.keys()):
            file_findings = findings_by_file[file_path]
            file_findings.sort(key=lambda f: f.item.start_line)

            p = Path(file_path)
            try:
                rel = p.relative_to(Path.cwd())
            except ValueError:
                rel = p

            parts = rel.parts
            if not parts:
                continue

            parent_key: tuple[str, ...] = ()
            parent_node: Tree = root_tree
            for part in parts[:-1]:
                key = (*parent_key, part)
                if key not in dir_nodes:
                    # Folder node (with trailing slash)
                    parent_node = parent_node.add(
                        f"[bold blue]{part}/[/bold blue]", guide_style="dim"
                    )
                    dir_nodes[key] = parent_node
                else:
                    parent_node = dir_nodes[key]
                parent_key = key

            file_node = parent_node.add(f"[bold green]{parts[-1]}[/bold green]", guide_style="dim")

            for finding in file_findings:
                item = finding.item
                if isinstance(item, CodeEndpoint):
                    label = Text(f"{item.method} {item.route} ", style="cyan")
                else:
                    label = Text(f"{item.function_name} ", style="magenta")
                label.append(f"(line {item.start_line}, {finding.confidence:.0%}) ", style="grey50")
                label.append(finding.reason, style="yellow")
                file_node.add(label)

        console.print(root_tree)

        summary = result.summary
        console.print("\n📊 Summary:")
        console.print(f"   Files scanned: {summary.files_scanned}")
        console.print(f"   Endpoints: {summary.total_endpoints}")
        console.print(f"   Functions: {summary.total_functions}")
        console.print(f"   Orphaned endpoints: {len(result.orphaned_endpoints)}")
        console.print(f"   Orphaned functions: {len(result.orphaned_functions)}")
        if summary.analysis_mode is AnalysisMode.FULL:
            console.print(f"   Active endpoints (Datadog): {len(result.active_endpoints)}")
        console.print(f"   Scan duration: {summary.scan_duration:.2f}s")
