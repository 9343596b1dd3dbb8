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

"""Clock augmented INS and tightly coupled INS/GNSS correction"""

from .clock_filter import ClockAugmentedFilterModel
from .config import TightlyCoupledConfig
from .state import ClockAugmentedState, InvalidClockIndexError
from .tightly import CorrectionOutcome, ReceiverState, TightlyCoupledCorrector

__all__ = [
    'ClockAugmentedState', 'InvalidClockIndexError', 'ClockAugmentedFilterModel',
    'TightlyCoupledConfig', 'TightlyCoupledCorrector', 'ReceiverState', 'CorrectionOutcome',
]
