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

"""CMAP backbone classes.

The class of a residue is read from the types of `(-C, N, CA, C, +N)`.
Proline shows up as `N`/`CP1` and glycine as `CT2`, both in the residue
itself and, through `+N`, in its successor.
"""

from typing import Optional, Sequence, Tuple

from charmm_eef1.errors import CmapClassError, MissingAtomError
from charmm_eef1.interactions import CmapInteraction
from charmm_eef1.structure import Chain, Residue, TerminalStatus


CMAP_CLASSES: Tuple[Tuple[str, str, str, str, str], ...] = (
    ('C', 'NH1', 'CT1', 'C', 'NH1'),
    ('C', 'NH1', 'CT1', 'C', 'N'),
    ('C', 'N', 'CP1', 'C', 'NH1'),
    ('C', 'N', 'CP1', 'C', 'N'),
    ('C', 'NH1', 'CT2', 'C', 'NH1'),
    ('C', 'NH1', 'CT2', 'C', 'N'),
)


def cmap_class(types: Sequence[str]) -> Optional[int]:
  """Index of the class whose types equal `types`, or None."""
  types = tuple(types)
  for i, pattern in enumerate(CMAP_CLASSES):
    if pattern == types:
      return i
  return None


def _backbone(residue: Residue):
  names = ((residue.previous, 'C'), (residue, 'N'), (residue, 'CA'),
           (residue, 'C'), (residue.next, 'N'))
  atoms = []
  for owner, name in names:
    if owner is None or not owner.has_atom(name):
      raise MissingAtomError('cmap', residue, name)
    atoms.append(owner[name])
  return tuple(atoms)


def assign_cmap(chain: Chain) -> Tuple[CmapInteraction, ...]:
  """Classifies every residue that is not at either end of the chain.

  Raises:
    CmapClassError: If a backbone matches none of the six classes.
  """
  interactions = []
  for residue in chain:
    if residue.terminal_status in (TerminalStatus.NTERM,
                                   TerminalStatus.CTERM):
      continue
    atoms = _backbone(residue)
    types = tuple(a.atom_type for a in atoms)
    index = cmap_class(types)
    if index is None:
      raise CmapClassError(atoms, types)
    interactions.append(CmapInteraction(
        residue=residue, residue_index=residue.index, cmap_type_index=index,
        atoms=atoms))
  return tuple(interactions)
