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

"""Assigners for bonds, angles and proper torsions.

All three walk the covalent bond graph of a `Chain` and resolve each tuple of
atom types against its table with `lookup`.
"""

from typing import List, Sequence, Tuple

from absl import logging

from charmm_eef1 import lookup
from charmm_eef1.errors import MissingParameterError
from charmm_eef1.interactions import (AngleBendInteraction,
                                      BondedPairInteraction,
                                      TorsionDiagnostic, TorsionInteraction)
from charmm_eef1.params import (AngleBendParameter, BondedPairParameter,
                                TorsionParameter)
from charmm_eef1.structure import Chain


def assign_bonded_pairs(
    chain: Chain, parameters: Sequence[BondedPairParameter]
) -> Tuple[BondedPairInteraction, ...]:
  """Resolves every covalent bond of `chain`.

  Each bond is visited once, with its atoms in canonical order. The first
  table entry carrying the two types in either order is used.

  Raises:
    MissingParameterError: If a bond has no matching entry.
  """
  interactions = []
  for atom1, atom2 in chain.bonds():
    types = (atom1.atom_type, atom2.atom_type)
    match = lookup.first_match(parameters, lookup.either_order(types),
                               by_stage=False)
    if match is None:
      raise MissingParameterError('bond', (atom1, atom2), types)
    p = match.entry
    interactions.append(BondedPairInteraction(atom1, atom2, r0=p.r0, kb=p.kb))
  return tuple(interactions)


def assign_angle_bends(
    chain: Chain, parameters: Sequence[AngleBendParameter]
) -> Tuple[AngleBendInteraction, ...]:
  """Resolves every angle `A1-A2-A3` with vertex `A2`.

  For each vertex the unordered pairs of its neighbours are visited once, in
  neighbour order. Entries are matched as `(t1, t2, t3)` or `(t3, t2, t1)`.

  Raises:
    MissingParameterError: If an angle has no matching entry.
  """
  interactions = []
  for atom2 in chain.atoms:
    neighbors = chain.neighbors(atom2)
    for i, atom1 in enumerate(neighbors):
      for atom3 in neighbors[i + 1:]:
        types = (atom1.atom_type, atom2.atom_type, atom3.atom_type)
        match = lookup.first_match(parameters, lookup.either_order(types),
                                   by_stage=False)
        if match is None:
          raise MissingParameterError('angle', (atom1, atom2, atom3), types)
        p = match.entry
        interactions.append(AngleBendInteraction(
            atom1, atom2, atom3, theta0=p.theta0, k0=p.k0, r13=p.r13,
            kub=p.kub))
  return tuple(interactions)


def _torsion(atoms, entry, reverse: bool) -> TorsionInteraction:
  if reverse:
    atoms = atoms[::-1]
  return TorsionInteraction(*atoms, phi0=entry.phi0, cp=entry.cp,
                            mult=entry.mult)


def assign_torsions(
    chain: Chain,
    parameters: Sequence[TorsionParameter],
    strict: bool = False
) -> Tuple[Tuple[TorsionInteraction, ...], Tuple[TorsionDiagnostic, ...]]:
  """Resolves every proper dihedral `A1-A2-A3-A4` of `chain`.

  Every bond is used once as the central bond `A2-A3`. Entries are resolved
  in two stages. First every entry whose types equal `(t1, t2, t3, t4)`, or
  failing that `(t4, t3, t2, t1)`, is used; each yields one record, so
  multi-term dihedrals produce several records. Only if no specific entry
  matches, the first `(X, t2, t3, X)` entry is used, then the first
  `(X, t3, t2, X)` one. Records matched through a reversed pattern list
  their atoms reversed as well.

  Args:
    chain: Chain to assign.
    parameters: Torsion table.
    strict: If True a dihedral without parameters raises.

  Returns:
    The torsion records and the diagnostics of dihedrals with no parameter.

  Raises:
    MissingParameterError: If `strict` and a dihedral has no entry.
  """
  interactions: List[TorsionInteraction] = []
  diagnostics: List[TorsionDiagnostic] = []

  for atom2, atom3 in chain.bonds():
    for atom1 in chain.neighbors(atom2):
      if atom1 is atom3:
        continue
      for atom4 in chain.neighbors(atom3):
        if atom4 is atom2 or atom4 is atom1:
          continue
        atoms = (atom1, atom2, atom3, atom4)
        types = tuple(a.atom_type for a in atoms)

        matches = lookup.all_matches(parameters, lookup.either_order(types))
        if matches:
          interactions.extend(_torsion(atoms, m.entry, m.stage.reverse)
                              for m in matches)
          continue

        match = lookup.first_match(parameters,
                                   lookup.torsion_wildcard_stages(types))
        if match is not None:
          interactions.append(
              _torsion(atoms, match.entry, match.stage.reverse))
          continue

        if strict:
          raise MissingParameterError('torsion', atoms, types)
        diagnostic = TorsionDiagnostic(atoms, types)
        logging.warning('%s', diagnostic)
        diagnostics.append(diagnostic)

  return tuple(interactions), tuple(diagnostics)
