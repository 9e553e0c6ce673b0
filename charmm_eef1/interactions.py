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

"""Interaction records produced by the assigners.

Records reference the participating `Atom`s of the chain and carry every
constant the energy layer needs, so no further table lookups are required.
"""

from typing import NamedTuple, Optional, Tuple

from charmm_eef1.structure import Atom, Residue


class BondedPairInteraction(NamedTuple):
  atom1: Atom
  atom2: Atom
  r0: float
  kb: float


class AngleBendInteraction(NamedTuple):
  """Angle `atom1-atom2-atom3` with Urey-Bradley 1-3 term."""
  atom1: Atom
  atom2: Atom
  atom3: Atom
  theta0: float
  k0: float
  r13: float
  kub: float


class TorsionInteraction(NamedTuple):
  """One periodic term of a proper dihedral.

  A dihedral with a multi-term parameter yields one record per term.
  """
  atom1: Atom
  atom2: Atom
  atom3: Atom
  atom4: Atom
  phi0: float
  cp: float
  mult: int


class TorsionDiagnostic(NamedTuple):
  """A proper dihedral for which no parameter was found."""
  atoms: Tuple[Atom, Atom, Atom, Atom]
  types: Tuple[str, str, str, str]

  def __str__(self) -> str:
    return ('No torsion parameter for ' +
            ' '.join(str(a) for a in self.atoms) +
            ' (' + ' '.join(self.types) + ')')


class ImproperTorsionInteraction(NamedTuple):
  atom1: Atom
  atom2: Atom
  atom3: Atom
  atom4: Atom
  phi0: float
  cp: float


class SolvationFactors(NamedTuple):
  """EEF1 constants of a heavy atom pair.

  Attributes:
      fac_12: Desolvation prefactor of atom 1 by atom 2.
      fac_21: Desolvation prefactor of atom 2 by atom 1.
      vdw_radius1, vdw_radius2: Van der Waals radii.
      lambda1, lambda2: Screening lengths.
  """
  fac_12: float
  fac_21: float
  vdw_radius1: float
  vdw_radius2: float
  lambda1: float
  lambda2: float


class NonBondedInteraction(NamedTuple):
  """Lennard-Jones and Coulomb pair.

  Attributes:
      atom1, atom2: Atoms in flattened chain order.
      qq: `q1 * q2 * coulomb_constant`.
      c6: `4 epsilon sigma^6`.
      c12: `4 epsilon sigma^12`.
      is_14: True for pairs exactly three bonds apart.
      solvation: EEF1 factors, None for solvation exempt pairs.
  """
  atom1: Atom
  atom2: Atom
  qq: float
  c6: float
  c12: float
  is_14: bool
  solvation: Optional[SolvationFactors] = None

  @property
  def do_eef1(self) -> bool:
    return self.solvation is not None


class CmapInteraction(NamedTuple):
  """Backbone correction map class of a residue.

  Attributes:
      residue: The residue.
      residue_index: Sequence index of the residue.
      cmap_type_index: One of the six CHARMM36 classes.
      atoms: `(-C, N, CA, C, +N)`.
  """
  residue: Residue
  residue_index: int
  cmap_type_index: int
  atoms: Tuple[Atom, Atom, Atom, Atom, Atom]
