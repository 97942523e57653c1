import typer

from route_codemod.cli.migrate import migrate, rewrite, show

app = typer.Typer(
    name="route-codemod",
    help="Route codemod CLI — fold Remix route module exports into defineRoute().",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("migrate")(migrate)
app.command("rewrite")(rewrite)
app.command("show")(show)


def main() -> None:
    app()
