"""Command-line interface for the Lattice object store."""

import json
import logging
import sys
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from lattice_objects.exceptions import LocalInputError, ObjectStoreError
from lattice_objects.models import ConnectionParameters
from lattice_objects.store import ObjectStore

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Interact with the Lattice object store.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)
console_err = Console(stderr=True)

BaseURLOption = typer.Option(
    ..., "--base-url", "-b", envvar="LATTICE_BASE_URL", help="Base URL of the Lattice environment."
)
VMTokenOption = typer.Option(
    ...,
    "--lattice-vm-token",
    "-v",
    envvar="LATTICE_VM_TOKEN",
    show_envvar=False,
    help="Bearer token for the authorization header.",
)
EnvTokenOption = typer.Option(
    ...,
    "--lattice-env-token",
    "-e",
    envvar="LATTICE_ENV_TOKEN",
    show_envvar=False,
    help="Bearer token for the anduril-sandbox-authorization header.",
)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def fail(error: Exception) -> NoReturn:
    """Report an error on stderr and exit non-zero."""
    console_err.print(
        f"[bold red]Error:[/bold red] {escape(str(error))}", highlight=False, soft_wrap=True
    )
    raise typer.Exit(1)


def connect(base_url: str, vm_token: str, env_token: str) -> ObjectStore:
    try:
        connection = ConnectionParameters(base_url=base_url, vm_token=vm_token, env_token=env_token)
    except PydanticValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        fail(LocalInputError(f"invalid connection parameters: {fields} must not be empty"))
    return ObjectStore(connection)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging on stderr."),
):
    """Delete, upload, inspect, download and list paths in the object store."""
    setup_logging(verbose)


@app.command("delete")
def delete(
    path: str = typer.Option(..., "--path", "-p", help="Path to remove."),
    base_url: str = BaseURLOption,
    vm_token: str = VMTokenOption,
    env_token: str = EnvTokenOption,
):
    """Remove path from object store."""
    store = connect(base_url, vm_token, env_token)
    try:
        store.delete(path)
    except ObjectStoreError as e:
        fail(e)
    typer.echo(f"deleted path {path!r}")


@app.command("upload")
def upload(
    input_path: str = typer.Option(..., "--input-path", "-i", help="Path to upload."),
    object_store_path: str = typer.Option(
        ..., "--object-store-path", "-p", help="Target path in object store."
    ),
    time_to_live: Optional[str] = typer.Option(
        None, "--time-to-live", "-t", help="TTL duration string, e.g. 90s or 1h30m."
    ),
    base_url: str = BaseURLOption,
    vm_token: str = VMTokenOption,
    env_token: str = EnvTokenOption,
):
    """Upload a path."""
    store = connect(base_url, vm_token, env_token)
    try:
        path_metadata = store.upload(input_path, object_store_path, time_to_live=time_to_live)
    except ObjectStoreError as e:
        fail(e)
    typer.echo(path_metadata.to_json())


@app.command("object-metadata")
def object_metadata(
    path: str = typer.Option(..., "--path", "-p", help="Target path for metadata."),
    base_url: str = BaseURLOption,
    vm_token: str = VMTokenOption,
    env_token: str = EnvTokenOption,
):
    """Get metadata for a path."""
    store = connect(base_url, vm_token, env_token)
    try:
        headers = store.get_metadata(path)
    except ObjectStoreError as e:
        fail(e)
    typer.echo(json.dumps(headers))


@app.command("get")
def get(
    object_store_path: str = typer.Option(
        ..., "--object-store-path", "-p", help="Path to download."
    ),
    output_path: str = typer.Option(..., "--output-path", "-o", help="Output path to save file."),
    replace_output_path: bool = typer.Option(
        False,
        "--replace-output-path",
        "-r",
        help="If set, replaces the output path with the downloaded contents.",
    ),
    base_url: str = BaseURLOption,
    vm_token: str = VMTokenOption,
    env_token: str = EnvTokenOption,
):
    """Download a path."""
    store = connect(base_url, vm_token, env_token)
    try:
        copied = store.download(object_store_path, output_path, replace=replace_output_path)
    except ObjectStoreError as e:
        fail(e)
    typer.echo(f"wrote {copied} bytes to file {output_path!r}")


@app.command("list")
def list_paths(
    prefix: Optional[str] = typer.Argument(None, help="Prefix to list."),
    all_objects_in_mesh: bool = typer.Option(
        False, "--all-objects-in-mesh", help="Include objects held by other nodes in the mesh."
    ),
    base_url: str = BaseURLOption,
    vm_token: str = VMTokenOption,
    env_token: str = EnvTokenOption,
):
    """List all paths in the lattice mesh."""
    store = connect(base_url, vm_token, env_token)
    listed = 0
    try:
        for path_metadata in store.list(prefix=prefix, all_objects_in_mesh=all_objects_in_mesh):
            typer.echo(path_metadata.to_json())
            listed += 1
    except ObjectStoreError as e:
        fail(e)
    logger.debug("Listed %d paths", listed)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
