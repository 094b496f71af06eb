#
# Copyright 2023 Benjamin Kiessling
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
lineslice.lib.descriptor
~~~~~~~~~~~~~~~~~~~~~~~~

Parser for JSON region descriptors.
"""
import json
import logging

from typing import TYPE_CHECKING, Union

from lineslice.containers import Region
from lineslice.lib.exceptions import LineSliceInputException

if TYPE_CHECKING:
    from os import PathLike

__all__ = ['parse_region']

logger = logging.getLogger(__name__)


def parse_region(path: Union[str, 'PathLike']) -> Region:
    """
    Reads a region descriptor.

    Only the `Text`, `Dir`, and `Image` fields are extracted, matched
    case-insensitively. All other fields are ignored.

    Args:
        path: Path to a JSON file.

    Returns:
        A Region object.

    Raises:
        LineSliceInputException: if the file can't be read, isn't a JSON
        object, or lacks a required field.
    """
    logger.debug(f'Reading region descriptor {path}')
    try:
        with open(path, 'r', encoding='utf-8') as fp:
            data = json.load(fp)
    except OSError as e:
        raise LineSliceInputException(f'Unable to read region descriptor {path}: {e}') from e
    except ValueError as e:
        raise LineSliceInputException(f'{path} is not a valid JSON document: {e}') from e

    if not isinstance(data, dict):
        raise LineSliceInputException(f'{path} does not contain a JSON object')

    fields = {}
    for k, v in data.items():
        key = k.lower()
        # an exact match takes precedence over a case-insensitive one
        if key in ('text', 'dir', 'image') and (key not in fields or k == key.capitalize()):
            fields[key] = v

    for key in ('text', 'dir', 'image'):
        value = fields.get(key)
        if value is not None and not isinstance(value, str):
            raise LineSliceInputException(f'Field {key.capitalize()} of {path} is not a string')
    for key in ('dir', 'image'):
        if not fields.get(key):
            raise LineSliceInputException(f'{path} has no {key.capitalize()} field')

    return Region(text=fields.get('text') or '',
                  dir=fields['dir'],
                  image=fields['image'],
                  source=str(path))
