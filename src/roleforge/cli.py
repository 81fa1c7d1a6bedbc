import click
import logging
import traceback
from pydantic import ValidationError

from .config import BuilderConfig, RoleManifest
from .builder import RoleImageBuilder, DockerImageBuilder, role_image_name, role_dev_version
from .utils import setup_logger, parse_module_levels
from .exceptions import RoleForgeError, ConfigValidationError
from . import constants
from . import __version__


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) or None
    setup_logger(debug=debug, module_levels=module_levels, log_file=log_file)


def split_roles(value: str):
    if not value:
        return []
    return [name.strip() for name in value.split(',') if name.strip()]


def do_build_images(manifest_file, repository, compiled_packages, target, base_image_version, version,
                    config_store_address, config_store_prefix, dev, roles, workers, no_build):
    """Load the manifest and build the selected role images"""
    try:
        manifest = RoleManifest(manifest_file)
        selected = manifest.select_roles(split_roles(roles))
        try:
            config = BuilderConfig(
                repository=repository,
                compiled_packages_path=compiled_packages,
                target_path=target,
                config_store_address=config_store_address,
                config_store_prefix=config_store_prefix,
                version=version,
                base_image_version=base_image_version,
                dev=dev,
            )
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid builder settings:\n{e}")

        backend = None if no_build else DockerImageBuilder()
        builder = RoleImageBuilder(config, backend=backend)
        builder.build_role_images(selected, repository, version, skip_build=no_build, worker_count=workers)
        logging.info(f"Processed {len(selected)} role(s); build contexts are in '{target}'.")
    except RoleForgeError as e:
        logging.error(f"Image build failed: {e}")
        logging.debug(traceback.format_exc())
        raise click.Abort()


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'sched=DEBUG,gen=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='roleforge')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """roleforge - Build one container image per role

    \b
    Examples:
      roleforge build-images roles.yml -r hcf -c compiled -t out -b 0.1 -v 1.0 -w 4
      roleforge image-names roles.yml -r hcf -v 1.0
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command('build-images')
@click.argument('manifest_file', type=click.Path(dir_okay=False))
@click.option('-r', '--repository', required=True, help='Repository prefix of the image names')
@click.option('-c', '--compiled-packages', required=True, type=click.Path(file_okay=False),
              help='Directory with one sub-directory per compiled package')
@click.option('-t', '--target', required=True, type=click.Path(file_okay=False),
              help='Output directory for the per-role build contexts')
@click.option('-b', '--base-image-version', required=True, help='Tag of the role base image')
@click.option('-v', '--version', 'version', required=True, help='Tag of the role images')
@click.option('--config-store-address', default=constants.DEFAULT_CONFIG_STORE_ADDRESS, show_default=True,
              help='Address of the configuration store used at container start')
@click.option('--config-store-prefix', default=constants.DEFAULT_CONFIG_STORE_PREFIX, show_default=True,
              help='Key prefix in the configuration store')
@click.option('--dev', is_flag=True, help='Build unattributed dev images')
@click.option('--roles', help='Comma-separated names of the roles to build (default: all)')
@click.option('-w', '--workers', default=constants.DEFAULT_WORKER_COUNT, show_default=True, type=int,
              help='Number of images built concurrently')
@click.option('-n', '--no-build', is_flag=True, help='Only create the build contexts')
def build_images(manifest_file, repository, compiled_packages, target, base_image_version, version,
                 config_store_address, config_store_prefix, dev, roles, workers, no_build):
    """Create build contexts for the roles of MANIFEST_FILE and build their images

    \b
    Examples:
      roleforge build-images roles.yml -r hcf -c compiled -t out -b 0.1 -v 1.0
      roleforge build-images roles.yml -r hcf -c compiled -t out -b 0.1 -v 1.0 --dev -n
    """
    do_build_images(manifest_file, repository, compiled_packages, target, base_image_version, version,
                    config_store_address, config_store_prefix, dev, roles, workers, no_build)


@cli.command('image-names')
@click.argument('manifest_file', type=click.Path(dir_okay=False))
@click.option('-r', '--repository', required=True, help='Repository prefix of the image names')
@click.option('-v', '--version', 'version', help='Tag of the role images (default: content version)')
@click.option('--roles', help='Comma-separated names of the roles to list (default: all)')
def image_names(manifest_file, repository, version, roles):
    """Print the image name of every role in MANIFEST_FILE"""
    try:
        manifest = RoleManifest(manifest_file)
        for role in manifest.select_roles(split_roles(roles)):
            click.echo(role_image_name(repository, role.name, version or role_dev_version(role)))
    except RoleForgeError as e:
        logging.error(f"Failed to list image names: {e}")
        raise click.Abort()


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
