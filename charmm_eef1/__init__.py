# Copyright 2019 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CHARMM36 / EEF1-SB parameter assignment for protein chains.

Matches every bond, angle, proper and improper torsion, non-bonded pair and
CMAP backbone of a chain against CHARMM36 parameter tables and returns
interaction records carrying the resolved constants.

Example usage:
    >>> from charmm_eef1 import io, residues
    >>> import charmm_eef1
    >>>
    >>> parameters = io.read_parameter_set('charmm36_eef1sb')
    >>> solvation = io.read_solvation_table('charmm36_eef1sb/solvation.dat')
    >>> chain = residues.build_chain('ACDEFG')
    >>>
    >>> result = charmm_eef1.assign(chain, parameters, solvation)
    >>> topology = charmm_eef1.create_topology(result)
"""

from charmm_eef1.assign import Assignment, assign
from charmm_eef1.base import AssignmentOptions
from charmm_eef1.errors import (AssignmentError, CmapClassError,
                                MissingAtomError, MissingParameterError,
                                ParameterRecordError, ProtonationStateError,
                                UnknownResidueError)
from charmm_eef1.params import ParameterSet, SolvationTables, WILDCARD
from charmm_eef1.residues import build_chain
from charmm_eef1.structure import Atom, Chain, Residue, ResidueType
from charmm_eef1.topology import Topology, create_topology, validate_topology

__all__ = [
    'assign',
    'Assignment',
    'AssignmentOptions',
    'ParameterSet',
    'SolvationTables',
    'WILDCARD',
    'Atom',
    'Residue',
    'Chain',
    'ResidueType',
    'build_chain',
    'Topology',
    'create_topology',
    'validate_topology',
    'AssignmentError',
    'MissingParameterError',
    'MissingAtomError',
    'UnknownResidueError',
    'ProtonationStateError',
    'CmapClassError',
    'ParameterRecordError',
]
