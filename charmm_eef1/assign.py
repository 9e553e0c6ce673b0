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

"""Runs every assigner over a chain.

Example usage:
  >>> from charmm_eef1 import io, residues
  >>> from charmm_eef1.assign import assign
  >>> parameters = io.read_parameter_set('charmm36_eef1sb')
  >>> solvation = io.read_solvation_table('charmm36_eef1sb/solvation.dat')
  >>> chain = residues.build_chain('AGA')
  >>> result = assign(chain, parameters, solvation)
  >>> result.complete
  True
"""

from typing import Dict, NamedTuple, Optional, Tuple

from absl import logging

from charmm_eef1.base import AssignmentOptions
from charmm_eef1.bonded import (assign_angle_bends, assign_bonded_pairs,
                                assign_torsions)
from charmm_eef1.cmap import assign_cmap
from charmm_eef1.impropers import assign_improper_torsions
from charmm_eef1.interactions import (AngleBendInteraction,
                                      BondedPairInteraction, CmapInteraction,
                                      ImproperTorsionInteraction,
                                      NonBondedInteraction,
                                      TorsionDiagnostic, TorsionInteraction)
from charmm_eef1.nonbonded import assign_non_bonded
from charmm_eef1.params import ParameterSet, SolvationTables
from charmm_eef1.structure import Chain


class Assignment(NamedTuple):
  """Interactions of a chain with their resolved constants.

  Attributes:
      chain: The chain that was assigned.
      bonded_pairs: Bond records.
      angle_bends: Angle records.
      torsions: Proper torsion records, one per dihedral term.
      improper_torsions: Improper torsion records.
      non_bonded: Non-bonded pair records.
      cmap: CMAP class records.
      torsion_diagnostics: Dihedrals for which no torsion parameter exists.
  """

  chain: Chain
  bonded_pairs: Tuple[BondedPairInteraction, ...]
  angle_bends: Tuple[AngleBendInteraction, ...]
  torsions: Tuple[TorsionInteraction, ...]
  improper_torsions: Tuple[ImproperTorsionInteraction, ...]
  non_bonded: Tuple[NonBondedInteraction, ...]
  cmap: Tuple[CmapInteraction, ...]
  torsion_diagnostics: Tuple[TorsionDiagnostic, ...] = ()

  @property
  def complete(self) -> bool:
    """False if some proper dihedral was left without parameters."""
    return not self.torsion_diagnostics

  def summary(self) -> Dict[str, int]:
    return {
        'bond': len(self.bonded_pairs),
        'angle': len(self.angle_bends),
        'torsion': len(self.torsions),
        'improper': len(self.improper_torsions),
        'nonbonded': len(self.non_bonded),
        'nonbonded_14': sum(1 for p in self.non_bonded if p.is_14),
        'cmap': len(self.cmap),
        'missing_torsion': len(self.torsion_diagnostics),
    }


def assign(chain: Chain,
           parameters: ParameterSet,
           solvation: Optional[SolvationTables] = None,
           options: AssignmentOptions = AssignmentOptions()) -> Assignment:
  """Assigns force field parameters to every interaction of `chain`.

  Args:
    chain: Chain to assign.
    parameters: Parameter tables.
    solvation: Optional EEF1 tables. Without them no non-bonded pair carries
      solvation factors.
    options: Assignment options.

  Returns:
    An `Assignment`. Check `complete` before trusting the torsions.

  Raises:
    AssignmentError: For any missing mandatory parameter, unknown residue or
      histidine state, or unclassifiable backbone.
  """
  bonded_pairs = assign_bonded_pairs(chain, parameters.bonded_pairs)
  angle_bends = assign_angle_bends(chain, parameters.angle_bends)
  torsions, diagnostics = assign_torsions(chain, parameters.torsions,
                                          strict=options.strict_torsions)
  improper_torsions = assign_improper_torsions(chain,
                                               parameters.improper_torsions)
  non_bonded = assign_non_bonded(chain, parameters.non_bonded,
                                 parameters.non_bonded_14, solvation, options)
  cmap = assign_cmap(chain)

  result = Assignment(
      chain=chain,
      bonded_pairs=bonded_pairs,
      angle_bends=angle_bends,
      torsions=torsions,
      improper_torsions=improper_torsions,
      non_bonded=non_bonded,
      cmap=cmap,
      torsion_diagnostics=diagnostics)

  logging.info('Assigned %d residues: %s', len(chain), result.summary())
  if not result.complete:
    logging.warning('%d proper dihedrals have no torsion parameter.',
                    len(diagnostics))
  return result
