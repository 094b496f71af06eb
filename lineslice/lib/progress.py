# Copyright Benjamin Kiessling
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Handlers for rich-based progress bars.
"""
from typing import TYPE_CHECKING

from rich.progress import (BarColumn, Progress, ProgressColumn, TextColumn,
                           TimeElapsedColumn, TimeRemainingColumn)
from rich.text import Text

if TYPE_CHECKING:
    from rich.console import RenderableType

__all__ = ['LineSliceProgressBar']


class RegionsProcessedColumn(ProgressColumn):
    def __init__(self):
        super().__init__()

    def render(self, task) -> 'RenderableType':
        total = task.total if task.total is not None else "--"
        return Text(f"{int(task.completed)}/{total}", style='magenta')


class LineSliceProgressBar(Progress):
    """
    Adaptation of the default rich progress bar to fit with lineslice output.
    """
    def __init__(self, *args, **kwargs):
        columns = [TextColumn("[progress.description]{task.description}"),
                   BarColumn(),
                   TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                   RegionsProcessedColumn(),
                   TimeRemainingColumn(),
                   TimeElapsedColumn()]
        kwargs['refresh_per_second'] = 1
        super().__init__(*columns, *args, **kwargs)
