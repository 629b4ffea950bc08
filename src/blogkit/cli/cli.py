"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from blogkit.cli.commands import (
    build_cmd,
    commit_cmd,
    export_cmd,
    init_cmd,
    list_cmd,
    revert_cmd,
    revisions_cmd,
    score_cmd,
    state,
)


app = typer.Typer(name="blogkit", no_args_is_help=True, help="Block-content blog publishing pipeline")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level")] = False,
    ):
    state["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="init")(init_cmd)
app.command(name="build")(build_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="export")(export_cmd)
app.command(name="list")(list_cmd)
app.command(name="score")(score_cmd)
app.command(name="revisions")(revisions_cmd)
app.command(name="revert")(revert_cmd)
