"""
Command Line Interface for RTM.
"""
import logging
import sys

import click

from ..errors import ManifestError
from ..MODELS.manifest_config import RuntimeManifestConfig
from ..PARSERS.manifest_resolver import ManifestResolver
from ..REGISTRY.image_name import ImageName


@click.group()
@click.option('--file', '-f', default='runtimes.json', help='Runtime manifest path')
@click.option('--env-file', default=None, help='.env file with RTM_* settings')
@click.option('--prefix', default=None, help='Default image prefix')
@click.option('--tag', default=None, help='Default image tag')
@click.option('--bypass-local/--no-bypass-local', default=None, help='Skip pulls for local images')
@click.option('--local-prefix', default=None, help='Prefix marking local images')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, file, env_file, prefix, tag, bypass_local, local_prefix, verbose):
    """
    RTM - Runtime manifest resolver.

    Validates runtime manifests and shows the images, defaults and stem cells they resolve to.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    config = RuntimeManifestConfig.from_env(env_file)
    overrides = {
        'default_image_prefix': prefix,
        'default_image_tag': tag,
        'bypass_pull_for_local_images': bypass_local,
        'local_image_prefix': local_prefix,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    ctx.ensure_object(dict)
    ctx.obj['file'] = file
    ctx.obj['config'] = config


def _load(ctx):
    """
    Resolves the manifest named on the command line, exiting with an error message on failure.
    """
    try:
        return ManifestResolver(ctx.obj['config']).parse(ctx.obj['file'])
    except FileNotFoundError:
        click.echo(f"Error: {ctx.obj['file']} not found.")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: cannot read {ctx.obj['file']}: {e}")
    except ManifestError as e:
        click.echo(f"Error: {e}")
    sys.exit(1)


@cli.command()
@click.pass_context
def validate(ctx):
    """Check that the manifest resolves."""
    runtimes = _load(ctx)
    click.echo(f"Manifest OK: {len(runtimes.families)} families, "
               f"{len(runtimes.known_container_runtimes)} kinds.")


@cli.command()
@click.pass_context
def kinds(ctx):
    """List runtime kinds by family"""
    runtimes = _load(ctx)
    click.echo(f"{'FAMILY':12} {'KIND':15} {'IMAGE':40} DEFAULT")
    click.echo("-" * 76)
    for alias, manifests in runtimes.to_json().items():
        for m in manifests:
            click.echo(f"{alias:12} {m['kind']:15} {m['image']:40} {'yes' if m['default'] else ''}")


@cli.command()
@click.argument('ref')
@click.pass_context
def resolve(ctx, ref):
    """Show the image for a kind or '<family>:default'."""
    manifest = _load(ctx).resolve_default_runtime(ref)
    if manifest is None:
        click.echo(f"Error: {ref} not found.")
        sys.exit(1)
    click.echo(manifest.image.public_image_name)


@cli.command()
@click.pass_context
def stemcells(ctx):
    """List stem cells to pre-warm"""
    runtimes = _load(ctx)
    click.echo(f"{'KIND':15} {'IMAGE':40} {'COUNT':6} MEMORY")
    click.echo("-" * 72)
    for manifest, cell in sorted(runtimes.stemcells, key=lambda p: (p[0].kind, p[1].memory)):
        click.echo(f"{manifest.kind:15} {manifest.image.public_image_name:40} {cell.count:<6} {cell.memory}")


@cli.command('pull-policy')
@click.argument('image')
@click.pass_context
def pull_policy(ctx, image):
    """Tell whether IMAGE would be pulled or used as is."""
    runtimes = _load(ctx)
    try:
        name = ImageName.parse(image)
    except ManifestError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)
    click.echo("skip" if runtimes.skip_docker_pull(name) else "pull")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
