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

"""Options and physical constants shared by the assigners."""

from typing import NamedTuple


# Constants


# 1 / (4 pi eps0) in kJ mol^-1 nm e^-2, matching GROMACS charmm36 tables
# where sigma is in nm and epsilon in kJ/mol.
COULOMB_CONSTANT = 138.935485

# Mass used to tell hydrogens apart from heavy atoms.
HYDROGEN_MASS = 1.008

# Token that marks a wildcard type in parameter files.
WILDCARD_TOKEN = 'X'


class AssignmentOptions(NamedTuple):
  """Options controlling parameter assignment.

  Attributes:
      coulomb_constant: Prefactor multiplied into `q1 * q2` for every
          non-bonded pair.
      hydrogen_mass: Atoms with exactly this mass are treated as hydrogens and
          never receive implicit-solvent factors.
      strict_torsions: If True, a proper torsion without any matching
          parameter raises instead of being recorded as a diagnostic.
  """

  coulomb_constant: float = COULOMB_CONSTANT
  hydrogen_mass: float = HYDROGEN_MASS
  strict_torsions: bool = False
