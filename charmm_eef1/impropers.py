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

"""Improper torsions of CHARMM36 proteins.

Which impropers exist is not derived from the bond graph. Side chain
impropers come from a fixed table keyed by residue type; histidine selects
one of three sets depending on which ring nitrogens are protonated. On top of
that every residue gets the backbone impropers that keep the peptide bonds
on either side of it planar.
"""

import enum
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from charmm_eef1 import lookup
from charmm_eef1.errors import (MissingAtomError, MissingParameterError,
                                ProtonationStateError, UnknownResidueError)
from charmm_eef1.interactions import ImproperTorsionInteraction
from charmm_eef1.params import ImproperTorsionParameter
from charmm_eef1.structure import (Atom, Chain, Residue, ResidueType,
                                   TerminalStatus)


Quadruple = Tuple[str, str, str, str]


def _quadruples(spec: str) -> Tuple[Quadruple, ...]:
  tokens = spec.split()
  return tuple(tuple(tokens[i:i + 4]) for i in range(0, len(tokens), 4))


class HistidineState(enum.Enum):
  """Protonation of the histidine ring.

  Attributes:
    HSP: Both HD1 and HE2 present.
    HSD: Only HD1 present.
    HSE: Only HE2 present.
  """
  HSP = 'HSP'
  HSD = 'HSD'
  HSE = 'HSE'


def histidine_state(residue: Residue) -> HistidineState:
  """Reads the tautomer of a histidine from its ring protons.

  Raises:
    ProtonationStateError: If neither ring nitrogen is protonated.
  """
  has_hd1 = residue.has_atom('HD1')
  has_he2 = residue.has_atom('HE2')
  if has_hd1 and has_he2:
    return HistidineState.HSP
  if has_hd1:
    return HistidineState.HSD
  if has_he2:
    return HistidineState.HSE
  raise ProtonationStateError(residue)


SIDE_CHAIN_IMPROPERS: Mapping[ResidueType, Tuple[Quadruple, ...]] = (
    MappingProxyType({
        ResidueType.ALA: (),
        ResidueType.ARG: _quadruples('CZ NH1 NH2 NE'),
        ResidueType.ASN: _quadruples(
            'CG ND2 CB OD1  CG CB ND2 OD1  '
            'ND2 CG HD21 HD22  ND2 CG HD22 HD21'),
        ResidueType.ASP: _quadruples('CG CB OD2 OD1'),
        ResidueType.CYS: (),
        ResidueType.GLN: _quadruples(
            'CD NE2 CG OE1  CD CG NE2 OE1  '
            'NE2 CD HE21 HE22  NE2 CD HE22 HE21'),
        ResidueType.GLU: _quadruples('CD CG OE2 OE1'),
        ResidueType.GLY: (),
        ResidueType.ILE: (),
        ResidueType.LEU: (),
        ResidueType.LYS: (),
        ResidueType.MET: (),
        ResidueType.PHE: (),
        ResidueType.PRO: (),
        ResidueType.SER: (),
        ResidueType.THR: (),
        ResidueType.TRP: (),
        ResidueType.TYR: (),
        ResidueType.VAL: (),
    }))

HISTIDINE_IMPROPERS: Mapping[HistidineState, Tuple[Quadruple, ...]] = (
    MappingProxyType({
        HistidineState.HSP: _quadruples(
            'ND1 CG CE1 HD1  ND1 CE1 CG HD1  '
            'NE2 CD2 CE1 HE2  NE2 CE1 CD2 HE2'),
        HistidineState.HSE: _quadruples(
            'NE2 CD2 CE1 HE2  CD2 CG NE2 HD2  CE1 ND1 NE2 HE1  '
            'NE2 CE1 CD2 HE2  CD2 NE2 CG HD2  CE1 NE2 ND1 HE1'),
        HistidineState.HSD: _quadruples(
            'ND1 CG CE1 HD1  CD2 CG NE2 HD2  CE1 ND1 NE2 HE1  '
            'ND1 CE1 CG HD1  CD2 NE2 CG HD2  CE1 NE2 ND1 HE1'),
    }))


def side_chain_quadruples(residue: Residue) -> Tuple[Quadruple, ...]:
  """Atom name quadruples of the side chain impropers of `residue`.

  Raises:
    UnknownResidueError: For residue types without a template.
    ProtonationStateError: For a histidine without ring protons.
  """
  if residue.residue_type is ResidueType.HIS:
    return HISTIDINE_IMPROPERS[histidine_state(residue)]
  try:
    return SIDE_CHAIN_IMPROPERS[residue.residue_type]
  except KeyError:
    raise UnknownResidueError(residue) from None


def _atom(residue: Residue, name: str) -> Atom:
  if not residue.has_atom(name):
    raise MissingAtomError('improper', residue, name)
  return residue[name]


def backbone_quadruples(
    residue: Residue) -> List[Tuple[Atom, Atom, Atom, Atom]]:
  """Backbone impropers on the amide and carbonyl side of `residue`.

  `(N, -C, CA, HN)` unless the residue is N-terminal, with `CD` in place of
  `HN` for proline. `(C, CA, +N, O)` unless the residue is C-terminal, where
  it becomes `(C, CA, OXT, O)`.
  """
  quadruples = []
  if residue.terminal_status is not TerminalStatus.NTERM:
    previous = residue.previous
    if previous is None:
      raise MissingAtomError('improper', residue, '-C')
    amide = 'CD' if residue.residue_type is ResidueType.PRO else 'HN'
    quadruples.append((_atom(residue, 'N'), _atom(previous, 'C'),
                       _atom(residue, 'CA'), _atom(residue, amide)))

  if residue.terminal_status is not TerminalStatus.CTERM:
    following = residue.next
    if following is None:
      raise MissingAtomError('improper', residue, '+N')
    quadruples.append((_atom(residue, 'C'), _atom(residue, 'CA'),
                       _atom(following, 'N'), _atom(residue, 'O')))
  else:
    quadruples.append((_atom(residue, 'C'), _atom(residue, 'CA'),
                       _atom(residue, 'OXT'), _atom(residue, 'O')))
  return quadruples


def resolve_improper(
    atoms: Sequence[Atom],
    parameters: Sequence[ImproperTorsionParameter]
) -> ImproperTorsionInteraction:
  """Attaches the first matching improper entry to a quadruple of atoms.

  The table is scanned for `(t1, t2, t3, t4)`, then `(t4, t3, t2, t1)`, then
  `(t1, X, X, t4)` and finally `(t4, X, X, t1)`. The record keeps the atom
  order of `atoms` whichever pattern matched.

  Raises:
    MissingParameterError: If no stage matches.
  """
  types = tuple(a.atom_type for a in atoms)
  match = lookup.first_match(parameters, lookup.improper_stages(types))
  if match is None:
    raise MissingParameterError('improper', atoms, types)
  return ImproperTorsionInteraction(*atoms, phi0=match.entry.phi0,
                                    cp=match.entry.cp)


def assign_improper_torsions(
    chain: Chain, parameters: Sequence[ImproperTorsionParameter]
) -> Tuple[ImproperTorsionInteraction, ...]:
  """Side chain and backbone impropers of every residue, residue by residue."""
  interactions = []
  for residue in chain:
    for names in side_chain_quadruples(residue):
      atoms = tuple(_atom(residue, name) for name in names)
      interactions.append(resolve_improper(atoms, parameters))
    for atoms in backbone_quadruples(residue):
      interactions.append(resolve_improper(atoms, parameters))
  return tuple(interactions)
