"""CLI entry point for rcstrings."""

from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import RcStringsConfig
from .core import ResourceService, SettingsStore, StringResourceContext, UpdateReport
from .errors import RcStringsError
from .logging_config import configure_logging
from .project import ProjectScanner, RcFile, VCppProject, resolve_headers
from .strings.models import unescape_value
from .strings.textfile import TextFile, join_lines, read_text_file


def _rc_file(path: Path, header: Optional[Path]) -> RcFile:
    project = VCppProject(name=path.resolve().parent.name, path=path.parent)
    rc_file = RcFile(path=path, project=project)
    if header is not None:
        rc_file.link_header(header)
        return rc_file
    return resolve_headers(rc_file)


def _fail(error: Exception):
    click.secho(f"Error: {error}", fg='red', err=True)
    raise SystemExit(1)


def _print_update(report: UpdateReport, verbose: bool = False):
    if report.dry_run:
        if verbose:
            for path, preview in ((report.rc_path, report.rc_preview),
                                  (report.header_path, report.header_preview)):
                if preview is not None:
                    click.secho(f"\n--- {path}", bold=True)
                    click.echo(preview, nl=False)
        click.secho("Dry run - no files modified.", fg='cyan')
        return

    if report.rc_written:
        click.secho(f"  {report.rc_path}", fg='green')
    if report.header_written:
        click.secho(f"  {report.header_path}", fg='green')
    for error in report.errors:
        click.secho(f"  {error}", fg='red', err=True)


@click.group()
@click.version_option(version=__version__)
@click.option('--settings', 'settings_path', type=click.Path(path_type=Path),
              envvar='RCSTRINGS_SETTINGS', help='Settings file to use')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx: click.Context, settings_path: Optional[Path], verbose: bool):
    """Add and edit string resources of .rc files and keep resource.h in sync."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj['settings'] = SettingsStore(settings_path)
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('root', type=click.Path(exists=True, file_okay=False, path_type=Path), default='.')
def scan(root: Path):
    """List the .rc files found under ROOT and their headers."""
    rc_files = ProjectScanner(root).scan()

    if not rc_files:
        click.secho("No RC files detected.", fg='yellow')
        return

    click.echo(f"RC files ({len(rc_files)} total):\n")
    for rc_file in rc_files:
        click.secho(f"{rc_file.project_name}: {rc_file.path}", fg='cyan')
        click.echo(f"  header: {rc_file.header_path}")
        for sibling in rc_file.sibling_headers:
            click.echo(f"  also includes: {sibling}")
        for directory in rc_file.project.additional_include_directories:
            click.echo(f"  include dir: {directory}")


@cli.command(name='list')
@click.argument('rc_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--header', type=click.Path(dir_okay=False, path_type=Path),
              help='Companion header, found from the #include lines by default')
def list_strings(rc_path: Path, header: Optional[Path]):
    """Show the string resources of RC_PATH in id order."""
    try:
        context = StringResourceContext(_rc_file(rc_path, header))
        content = context.content
    except RcStringsError as e:
        _fail(e)

    if not len(content) and not content.unresolved:
        click.secho("No string resources found.", fg='yellow')
        return

    click.echo(f"String resources ({len(content)} total):\n")
    for entry in content.sorted_by_id():
        line = f'{entry.id:>6}  {entry.name}  "{unescape_value(entry.value)}"'
        if entry.is_foreign:
            click.secho(f"{line}  (defined in another header)", fg='cyan')
        else:
            click.echo(line)

    if content.unresolved:
        click.secho(f"\nWithout id ({len(content.unresolved)}):", fg='yellow', bold=True)
        for name, value in content.unresolved:
            click.echo(f'        {name}  "{unescape_value(value)}"')


@cli.command()
@click.argument('name')
@click.argument('value')
@click.option('--rc', 'rc_path', type=click.Path(dir_okay=False, path_type=Path),
              help='RC file to add to, the last selected one by default')
@click.option('--root', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default='.', help='Directory holding the projects')
@click.option('--id', 'resource_id', type=click.IntRange(1, 0xFFFF), help='Id to use instead of a generated one')
@click.option('--random-ids/--sequential-ids', default=None, help='Id generation mode (remembered)')
@click.option('--raw', is_flag=True, help='Store VALUE as written, without escaping')
@click.option('--replace-with', help='Template of the replacement code, {0} is the name (remembered)')
@click.option('--replace/--no-replace', default=None, help='Print the replacement code (remembered)')
@click.option('--dry-run', is_flag=True, help='Show what would change without writing files')
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    value: str,
    rc_path: Optional[Path],
    root: Path,
    resource_id: Optional[int],
    random_ids: Optional[bool],
    raw: bool,
    replace_with: Optional[str],
    replace: Optional[bool],
    dry_run: bool
):
    """Add a string resource NAME with VALUE.

    The .rc file is rewritten and a #define for NAME is merged into its
    header.
    """
    config = RcStringsConfig(escape_values=not raw, dry_run=dry_run, verbose=ctx.obj['verbose'])

    try:
        service = ResourceService(
            config=config,
            root=root,
            settings_store=ctx.obj['settings'],
            random_ids=random_ids,
            replace_with=replace_with,
            is_replacing_with=replace
        )
        report = service.add_resource(name, value, rc_path=rc_path, resource_id=resource_id)
    except RcStringsError as e:
        _fail(e)

    entry = report.entry
    click.echo(f"Added {entry.name} = {entry.id} to {report.rc_file.path}")
    _print_update(report.update, config.verbose)

    if report.replacement is not None:
        click.echo("\nReplacement code:")
        click.secho(f"  {report.replacement}", bold=True)

    if not dry_run:
        try:
            service.save_settings()
        except RcStringsError as e:
            click.secho(f"Warning: {e}", fg='yellow', err=True)

    if not report.update.ok:
        raise SystemExit(1)


@cli.command()
@click.argument('name')
@click.argument('value')
@click.option('--root', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default='.', help='Directory holding the projects')
@click.option('--raw', is_flag=True, help='Store VALUE as written, without escaping')
@click.option('--dry-run', is_flag=True, help='Show what would change without writing files')
@click.pass_context
def edit(ctx: click.Context, name: str, value: str, root: Path, raw: bool, dry_run: bool):
    """Change the value of the existing string resource NAME."""
    config = RcStringsConfig(escape_values=not raw, dry_run=dry_run, verbose=ctx.obj['verbose'])

    try:
        service = ResourceService(config=config, root=root, settings_store=ctx.obj['settings'])
        report = service.edit_resource(name, value)
    except RcStringsError as e:
        _fail(e)

    click.echo(f"Updated {report.entry.name} in {report.rc_file.path}")
    _print_update(report.update, config.verbose)

    if not report.update.ok:
        raise SystemExit(1)


@cli.command()
@click.argument('rc_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--header', type=click.Path(dir_okay=False, path_type=Path),
              help='Companion header, found from the #include lines by default')
@click.option('--into', 'target', type=click.Path(dir_okay=False, path_type=Path),
              help='Header to merge the defines into, the companion header by default')
@click.option('--id-column', type=click.IntRange(1), default=RcStringsConfig.id_column,
              show_default=True, help='Column at which generated ids start')
@click.option('--dry-run', is_flag=True, help='Print the merged header instead of writing it')
def sync(rc_path: Path, header: Optional[Path], target: Optional[Path], id_column: int, dry_run: bool):
    """Add the missing #define lines of RC_PATH strings to a header."""
    config = RcStringsConfig(id_column=id_column, dry_run=dry_run)

    try:
        context = StringResourceContext(_rc_file(rc_path, header), config=config)
        target = target or context.rc_file.header_path
        if dry_run:
            document = read_text_file(target) if target.exists() else TextFile()
            lines = context.header_writer.merge(document.lines, context.content)
            click.echo(join_lines(lines, document.newline), nl=False)
            return
        document = context.header_writer.write_file(context.content, target)
    except RcStringsError as e:
        _fail(e)

    click.secho(f"Synchronized {target} ({len(document.lines)} lines)", fg='green')


@cli.command(name='next-id')
@click.argument('rc_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--header', type=click.Path(dir_okay=False, path_type=Path),
              help='Companion header, found from the #include lines by default')
@click.option('--random', 'random_ids', is_flag=True, help='Draw a random id')
def next_id(rc_path: Path, header: Optional[Path], random_ids: bool):
    """Print the id a new string of RC_PATH would get."""
    config = RcStringsConfig(random_ids=random_ids)

    try:
        context = StringResourceContext(_rc_file(rc_path, header), config=config)
        click.echo(context.next_id())
    except RcStringsError as e:
        _fail(e)


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
