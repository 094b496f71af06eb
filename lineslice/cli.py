#
# Copyright 2015 Benjamin Kiessling
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express
# or implied. See the License for the specific language governing
# permissions and limitations under the License.
"""
lineslice.cli
~~~~~~~~~~~~~

Command line driver for line snippet extraction.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict

import click
import yaml

from PIL import Image
from rich.traceback import install

from lineslice.lib import log

if TYPE_CHECKING:
    from os import PathLike

logging.captureWarnings(True)
logger = logging.getLogger('lineslice')

# install rich traceback handler
install(suppress=[click])

# raise default max image size to 20k * 20k pixels
Image.MAX_IMAGE_PIXELS = 20000 ** 2


def _recursive_update(a: Dict[str, Any],
                      b: Dict[str, Any]) -> Dict[str, Any]:
    """Like standard ``dict.update()``, but recursive so sub-dict gets updated.
    """
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(a.get(k), dict):
            a[k] = _recursive_update(a[k], v)
        else:
            a[k] = b[k]
    return a


def _load_config(ctx: click.Context,
                 param: click.Parameter,
                 path: 'PathLike') -> None:
    """
    Fetch parameters values from configuration file and sets them as defaults.
    """
    if not path:
        return
    logger.info(f'Load configuration from {path.name}')
    try:
        conf = yaml.safe_load(path)
    except yaml.YAMLError as e:
        raise click.BadParameter(f'Invalid configuration file: {e}', ctx=ctx, param=param)
    if conf is None:
        return
    if not isinstance(conf, dict):
        raise click.BadParameter('Configuration file does not contain a mapping', ctx=ctx, param=param)
    conf = {k.replace('-', '_'): v for k, v in conf.items()}
    ctx.default_map = _recursive_update(dict(ctx.default_map or {}), conf)


def _default_map() -> Dict[str, Any]:
    from lineslice.configs import SegmentationConfig
    return SegmentationConfig().__dict__


@click.command('lineslice', context_settings=dict(show_default=True,
                                                  default_map=_default_map()))
@click.version_option(package_name='lineslice')
@click.pass_context
@click.option('-v', '--verbose', default=0, count=True, show_default=False)
@click.option('-r', '--raise-on-error/--no-raise-on-error',
              help='Raises the exception of a failed region descriptor '
              'instead of printing the error and exiting.')
@click.option('-n', '--dry-run/--no-dry-run',
              help='Computes line bounds without writing any output.')
@click.option('--suffix', help='Suffix of the line image files.')
@click.option('--gt-suffix', help='Suffix of the ground truth text files.')
@click.option('--config',
              type=click.File(mode='r', lazy=True),
              help='Path to YAML configuration file.',
              callback=_load_config,
              is_eager=True,
              expose_value=False,
              required=False)
@click.argument('regions', nargs=-1, type=click.Path(dir_okay=False))
def cli(ctx, verbose, raise_on_error, dry_run, suffix, gt_suffix, regions):
    """
    Splits the page images referenced by JSON region descriptors into line
    images paired with the lines of their transcription.
    """
    if not regions:
        click.echo(ctx.get_help())
        ctx.exit()

    from lineslice.configs import SegmentationConfig
    from lineslice.driver import SegmentationDriver
    from lineslice.lib.progress import LineSliceProgressBar

    log.set_logger(logger, level=30 - min(10 * verbose, 20))

    config = SegmentationConfig(suffix=suffix,
                                gt_suffix=gt_suffix,
                                dry_run=dry_run,
                                raise_on_error=raise_on_error)
    driver = SegmentationDriver(config, logger=logger)

    segmented, skipped, written = 0, 0, 0
    with LineSliceProgressBar() as progress:
        task = progress.add_task('Segmenting', total=len(regions), visible=not verbose)
        for result in driver.run(regions):
            if result.failed:
                progress.stop()
                log.message(f'Segmenting {result.source}\t', nl=False)
                log.message('✗', fg='red')
                if config.raise_on_error:
                    raise result.error
                ctx.exit(1)
            if result.status == 'skipped':
                skipped += 1
            else:
                segmented += 1
                written += len(result.written) // 2
            progress.update(task, advance=1)

    log.message(f'Wrote {written} lines from {segmented} regions ({skipped} skipped)')
