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

"""Per-epoch raw GNSS measurements of one receiver clock"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

import pandas as pd


class MeasurementItem(IntEnum):
    """Kinds of raw measurement carried per satellite

    Attributes
    ----------
    L1_PSEUDORANGE : int
        L1 pseudorange (m)
    L1_DOPPLER : int
        L1 Doppler (Hz)
    L1_CARRIER_PHASE : int
        L1 carrier phase (cycles)
    L1_RANGE_RATE : int
        L1 range rate (m/s)
    """
    L1_PSEUDORANGE = 0
    L1_DOPPLER = 1
    L1_CARRIER_PHASE = 2
    L1_RANGE_RATE = 3


def _item_label(item: int):
    try:
        return MeasurementItem(item).name
    except ValueError:
        return item


@dataclass
class RawObservationSet:
    """GNSS raw measurements of one epoch for one receiver clock.

    Attributes
    ----------
    time : float
        Epoch of the measurements in GPS time (s)
    clock_index : int
        Receiver clock channel that produced the measurements
    solver : object, optional
        Ranging solver providing relative_property(); the epoch is skipped
        when it is not set
    measurement : dict[int, dict[int, float]]
        Satellite number -> measurement item -> value

    Notes
    -----
    Values are keyed by (satellite, item), so each pair holds at most one
    value. The set is built once per epoch and consumed by the corrector.
    """
    time: float = 0.0
    clock_index: int = 0
    solver: Optional[object] = None
    measurement: dict = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.measurement)

    def set_measurement(self, prn: int, item: int, value: float):
        """Store a measurement, replacing any previous value of the same item"""
        self.measurement.setdefault(prn, {})[int(item)] = float(value)

    def get_measurement(self, prn: int, item: int, default: Optional[float] = None) -> Optional[float]:
        return self.measurement.get(prn, {}).get(int(item), default)

    def measurement_of(self, item: int, scaling: float = 1.0) -> list[tuple[int, float]]:
        """
        Extract one measurement item of every satellite

        Parameters
        ----------
        item : int
            Measurement item
        scaling : float, optional
            Factor applied to each value

        Returns
        -------
        list[tuple[int, float]]
            (satellite, value * scaling) for satellites having the item
        """
        res = []
        for prn, values in self.measurement.items():
            if int(item) not in values:
                continue
            res.append((prn, values[int(item)] * scaling))
        return res

    @staticmethod
    def difference(operand: list[tuple[int, float]],
                   argument: list[tuple[int, float]],
                   scaling: float = 1.0) -> list[tuple[int, float]]:
        """
        Difference of two per-satellite lists, matched by satellite

        Returns
        -------
        list[tuple[int, float]]
            (satellite, (operand - argument) * scaling), in operand order
        """
        lookup = dict(argument)
        return [(prn, (value - lookup[prn]) * scaling)
                for prn, value in operand if prn in lookup]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabulate the measurements

        Returns
        -------
        pd.DataFrame
            One row per satellite (index 'prn'), one column per measurement
            item name; missing items are NaN
        """
        records = {
            prn: {_item_label(item): value for item, value in values.items()}
            for prn, values in self.measurement.items()
        }
        df = pd.DataFrame.from_dict(records, orient='index')
        df.index.name = 'prn'
        return df.sort_index()
