"""CLI entry point for commit-graph."""

import json
import logging
import sys

import click

from commit_graph.config import LayoutConfig, RenderConfig
from commit_graph.errors import GraphLayoutError
from commit_graph.ir.history import UNCOMMITTED_ID, with_uncommitted_changes
from commit_graph.layout.engine import GraphLayoutEngine
from commit_graph.layout.preview import MergePreviewOverlay
from commit_graph.parsers import parse
from commit_graph.renderers.text import TextRenderer

logger = logging.getLogger("commit_graph")


def _write(output: str | None, text: str) -> None:
    if output:
        try:
            with open(output, "w") as f:
                f.write(text)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(text, nl=False)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--ascii", "-a", "use_ascii", is_flag=True, help="Use plain ASCII instead of Unicode")
@click.option("--head", "head_id", type=str, default=None, help="Commit id of the current HEAD")
@click.option("--merge", "-m", "merge_heads", multiple=True, help="Branch head to preview a merge of (repeatable)")
@click.option("--merge-all", is_flag=True, help="Preview merging every branch head in the input into HEAD")
@click.option("--uncommitted", "-u", is_flag=True, help="Show a working-tree row above HEAD")
@click.option("--palette-size", type=click.IntRange(min=1), default=8, show_default=True, help="Number of lane colors")
@click.option("--strict", is_flag=True, help="Fail when a parent is listed before its child")
@click.option("--open-ended", is_flag=True, help="Keep lanes open for parents beyond the end of the input")
@click.option("--json", "as_json", is_flag=True, help="Print the layout as JSON instead of drawing it")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Log layout decisions to stderr")
def main(
    input: str | None,
    use_ascii: bool,
    head_id: str | None,
    merge_heads: tuple[str, ...],
    merge_all: bool,
    uncommitted: bool,
    palette_size: int,
    strict: bool,
    open_ended: bool,
    as_json: bool,
    output: str | None,
    verbose: bool,
) -> None:
    """Lay out commit history (git log text or JSON) as a lane graph."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        history = parse(text)
    except ValueError as e:
        click.echo(f"parse error:\n{e}", err=True)
        sys.exit(1)

    head_id = head_id or history.head_id
    records = history.records
    if uncommitted:
        if head_id is None:
            if not records:
                click.echo("error: --uncommitted needs a HEAD commit", err=True)
                sys.exit(1)
            head_id = records[0].id
            logger.info("no --head given; using %s", head_id)
        records = with_uncommitted_changes(records, head_id)

    engine = GraphLayoutEngine(LayoutConfig(palette_size=palette_size, strict=strict, open_ended=open_ended))
    try:
        layout = engine.layout(records, head_id=head_id)
        if merge_all:
            merge_heads += tuple(h for h in layout.heads if h != UNCOMMITTED_ID and h not in merge_heads)
        if merge_heads or merge_all:
            layout = MergePreviewOverlay(layout).apply(merge_heads)
    except GraphLayoutError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    for diagnostic in layout.diagnostics:
        logger.info("%s", diagnostic.describe())

    if as_json:
        rendered = json.dumps(layout.to_dict(), indent=2) + "\n"
    else:
        subjects = {rec.id: rec.subject for rec in records if rec.subject}
        rendered = TextRenderer(RenderConfig(unicode=not use_ascii)).render(layout, subjects)
    _write(output, rendered)


if __name__ == "__main__":
    main()
