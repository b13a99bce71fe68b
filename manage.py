import click

from mediateca import create_app
from mediateca.services.provisioner import ensure_default_folder

app = create_app()


@app.cli.command("default-folder-path")
def default_folder_path() -> None:
    """Imprime solo el path de la carpeta por defecto (útil en scripts)."""

    click.echo(ensure_default_folder().path)


if __name__ == "__main__":
    app.cli.main()
