"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdspec.cli.commands import convert_cmd, renumber_cmd, sections_cmd


app = typer.Typer(name="mdspec", no_args_is_help=True, help="Markdown specification to structured document converter")

app.command(name="convert")(convert_cmd)
app.command(name="sections")(sections_cmd)
app.command(name="renumber")(renumber_cmd)
