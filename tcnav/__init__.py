# Copyright 2024 inuex35
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
tcnav - Tightly coupled INS/GNSS navigation

Clock augmented strapdown INS, raw pseudorange/range rate measurement
update and receiver clock jump recovery.
"""

__version__ = "0.1.0"
__author__ = "PyINS Development Team"
__title__ = "tcnav"
__description__ = "Tightly coupled INS/GNSS measurement fusion"

from .core import *
from .attitude import *
from .coordinate import *
from .sensors import *
from .observation import *
from .gnss import *
from .ins import *
from .fusion import *
from .logger import LogContext, LogLevel, configure_logging, get_logger, setup_logger
