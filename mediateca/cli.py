"""Comandos personalizados para la CLI de Flask."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from mediateca.models.folder import Folder
from mediateca.services import folder_service, provisioner


@click.command("ensure-upload-folder")
@with_appcontext
def ensure_upload_folder() -> None:
    """Crear (si falta) y mostrar la carpeta por defecto de uploads."""

    folder = provisioner.ensure_default_folder()
    click.echo(f"{folder.name}\t{folder.uid}\t{folder.path}")


@click.command("list-folders")
@with_appcontext
def list_folders() -> None:
    """Imprime el árbol de carpetas con sangría por nivel."""

    folders: list[Folder] = folder_service.list_folders().all()
    if not folders:
        click.echo("(sin carpetas)")
        return

    children: dict[int | None, list[Folder]] = {}
    for folder in folders:
        children.setdefault(folder.parent_id, []).append(folder)

    def _walk(parent_id: int | None, depth: int) -> None:
        for folder in children.get(parent_id, []):
            click.echo(f"{'  ' * depth}{folder.name} [{folder.uid}]")
            _walk(folder.id, depth + 1)

    _walk(None, 0)


def register_cli(app) -> None:
    for command in (ensure_upload_folder, list_folders):
        if command.name not in app.cli.commands:
            app.cli.add_command(command)
