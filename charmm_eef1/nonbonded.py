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

"""Non-bonded pairs with Lennard-Jones, Coulomb and EEF1 constants.

Pairs are classified by their topological distance `d`:

  d <= 2: excluded (bonded or sharing a bonded neighbour).
  d == 3: 1-4 pair, explicit 1-4 table entry if present, combining rule
    otherwise.
  d > 3: full pair, combining rule.

The combining rule is Lorentz-Berthelot: arithmetic mean of sigma and
geometric mean of epsilon.

Distances come from `Chain.neighborhood`, which runs the same search as
`Chain.distance` for all atoms within three bonds at once. Atoms outside the
neighbourhood are more than three bonds apart or unreachable.
"""

import math
from typing import Dict, NamedTuple, Optional, Sequence, Tuple

from charmm_eef1 import lookup
from charmm_eef1.base import AssignmentOptions
from charmm_eef1.errors import MissingParameterError
from charmm_eef1.interactions import NonBondedInteraction, SolvationFactors
from charmm_eef1.params import (NonBonded14Parameter, NonBondedParameter,
                                SolvationTables)
from charmm_eef1.structure import Atom, Chain


# Pairs this many bonds apart or closer are excluded.
EXCLUDED_DISTANCE = 2
PAIR_14_DISTANCE = 3


class LennardJones(NamedTuple):
  sigma: float
  epsilon: float


def combine(p1: LennardJones, p2: LennardJones) -> LennardJones:
  """Arithmetic mean of sigma, geometric mean of epsilon."""
  return LennardJones(sigma=0.5 * (p1.sigma + p2.sigma),
                      epsilon=math.sqrt(p1.epsilon * p2.epsilon))


def lj_coefficients(p: LennardJones) -> Tuple[float, float]:
  """Returns `(c6, c12)` with `c6 = 4 e s^6` and `c12 = 4 e s^12`."""
  c6 = 4.0 * p.epsilon * p.sigma ** 6
  c12 = 4.0 * p.epsilon * p.sigma ** 12
  return c6, c12


def non_bonded_parameter(
    atom: Atom, parameters: Sequence[NonBondedParameter]) -> LennardJones:
  """First entry for the type of `atom`.

  Raises:
    MissingParameterError: If the type has no entry.
  """
  for p in parameters:
    if p.atom_type == atom.atom_type:
      return LennardJones(p.sigma, p.epsilon)
  raise MissingParameterError('nonbonded', (atom,), (atom.atom_type,))


def pair_14_parameter(type1: str,
                      type2: str,
                      parameters_14: Sequence[NonBonded14Parameter],
                      p1: LennardJones,
                      p2: LennardJones) -> LennardJones:
  """Explicit 1-4 entry for the two types in either order, else combined."""
  match = lookup.first_match(parameters_14,
                             lookup.either_order((type1, type2)),
                             by_stage=False)
  if match is not None:
    return LennardJones(match.entry.sigma, match.entry.epsilon)
  return combine(p1, p2)


def _solvation_index(atom: Atom, solvation: SolvationTables) -> int:
  try:
    return solvation.type_index[atom.atom_type]
  except KeyError:
    raise MissingParameterError(
        'solvation', (atom,), (atom.atom_type,)) from None


def solvation_factors(index1: int, index2: int,
                      solvation: SolvationTables) -> SolvationFactors:
  return SolvationFactors(
      fac_12=float(solvation.factors[index1, index2]),
      fac_21=float(solvation.factors[index2, index1]),
      vdw_radius1=float(solvation.vdw_radius[index1]),
      vdw_radius2=float(solvation.vdw_radius[index2]),
      lambda1=float(solvation.screening_length[index1]),
      lambda2=float(solvation.screening_length[index2]))


def assign_non_bonded(
    chain: Chain,
    non_bonded: Sequence[NonBondedParameter],
    non_bonded_14: Sequence[NonBonded14Parameter] = (),
    solvation: Optional[SolvationTables] = None,
    options: AssignmentOptions = AssignmentOptions()
) -> Tuple[NonBondedInteraction, ...]:
  """Enumerates all non-excluded atom pairs of `chain`.

  Atoms are taken in flattened chain order and every pair `i < j` is
  visited once. EEF1 factors are attached only when `solvation` is given,
  neither atom is a hydrogen and the pair is more than three bonds apart.

  Raises:
    MissingParameterError: If an atom type has no non-bonded entry, or a
      heavy atom in a pair that needs EEF1 factors has no solvation entry.
  """
  atoms = chain.atoms
  base = [non_bonded_parameter(atom, non_bonded) for atom in atoms]

  heavy = [atom.mass != options.hydrogen_mass for atom in atoms]
  solvation_index: Dict[int, int] = {}

  def solvation_index_of(i: int) -> int:
    if i not in solvation_index:
      solvation_index[i] = _solvation_index(atoms[i], solvation)
    return solvation_index[i]

  interactions = []
  for i, atom1 in enumerate(atoms):
    nearby = chain.neighborhood(atom1, PAIR_14_DISTANCE)
    for j in range(i + 1, len(atoms)):
      atom2 = atoms[j]
      d = nearby.get(atom2)
      if d is not None and d <= EXCLUDED_DISTANCE:
        continue
      is_14 = d == PAIR_14_DISTANCE

      if is_14:
        lj = pair_14_parameter(atom1.atom_type, atom2.atom_type,
                               non_bonded_14, base[i], base[j])
      else:
        lj = combine(base[i], base[j])
      c6, c12 = lj_coefficients(lj)

      factors = None
      if solvation is not None and not is_14 and heavy[i] and heavy[j]:
        factors = solvation_factors(solvation_index_of(i),
                                    solvation_index_of(j), solvation)

      interactions.append(NonBondedInteraction(
          atom1, atom2,
          qq=atom1.charge * atom2.charge * options.coulomb_constant,
          c6=c6, c12=c12, is_14=is_14, solvation=factors))
  return tuple(interactions)
