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

"""Protein chain container and its covalent bond graph.

Atoms are compared by identity: two atoms with the same name and type in
different residues are different atoms. The chain owns the bond graph and
answers the two graph queries the assigners need, direct neighbours and the
topological distance between two atoms.
"""

import collections
import dataclasses
import enum
import sys
from typing import (Dict, Iterable, Iterator, List, Optional, Sequence, Tuple,
                    Union)

import numpy as onp


# Types


class ResidueType(enum.Enum):
  """The twenty standard amino acids."""
  ALA = 'ALA'
  ARG = 'ARG'
  ASN = 'ASN'
  ASP = 'ASP'
  CYS = 'CYS'
  GLN = 'GLN'
  GLU = 'GLU'
  GLY = 'GLY'
  HIS = 'HIS'
  ILE = 'ILE'
  LEU = 'LEU'
  LYS = 'LYS'
  MET = 'MET'
  PHE = 'PHE'
  PRO = 'PRO'
  SER = 'SER'
  THR = 'THR'
  TRP = 'TRP'
  TYR = 'TYR'
  VAL = 'VAL'


class TerminalStatus(enum.Enum):
  NONE = 0
  NTERM = 1
  CTERM = 2


# Distance reported for atoms that are not connected by any bond path.
UNREACHABLE = sys.maxsize


@dataclasses.dataclass(eq=False)
class Atom:
  """An atom of a residue.

  Attributes:
    name: Role of the atom within its residue (e.g. `'CA'`).
    atom_type: Force field type label.
    charge: Partial charge.
    mass: Atomic mass.
    position: Optional 3-D position.
    index: Position within the residue, set by the residue.
    residue: Back reference to the owning residue, set by the residue.
  """
  name: str
  atom_type: str
  charge: float
  mass: float
  position: Optional[onp.ndarray] = None
  index: int = -1
  residue: Optional['Residue'] = dataclasses.field(
      default=None, repr=False)

  def __str__(self) -> str:
    if self.residue is None:
      return self.name
    return f'{self.residue}:{self.name}'


class Residue:
  """An amino acid residue.

  Atoms are addressable by position (`residue[0]`) and by name
  (`residue['CA']`). `previous`, `next`, `index` and `terminal_status` are
  filled in when the residue is placed in a `Chain`.
  """

  def __init__(self,
               residue_type: ResidueType,
               atoms: Sequence[Atom],
               bonds: Iterable[Tuple[str, str]] = ()):
    self.residue_type = residue_type
    self.atoms: List[Atom] = list(atoms)
    self._by_name: Dict[str, Atom] = {}
    for i, atom in enumerate(self.atoms):
      if atom.name in self._by_name:
        raise ValueError(f'Duplicate atom {atom.name} in {residue_type.value}.')
      atom.index = i
      atom.residue = self
      self._by_name[atom.name] = atom
    self.bonds: Tuple[Tuple[str, str], ...] = tuple(bonds)
    for name1, name2 in self.bonds:
      for name in (name1, name2):
        if name not in self._by_name:
          raise ValueError(
              f'Bond {name1}-{name2} refers to missing atom {name} in '
              f'{residue_type.value}.')

    self.index = -1
    self.terminal_status = TerminalStatus.NONE
    self.previous: Optional['Residue'] = None
    self.next: Optional['Residue'] = None

  def __getitem__(self, key: Union[int, str]) -> Atom:
    if isinstance(key, str):
      return self._by_name[key]
    return self.atoms[key]

  def __iter__(self) -> Iterator[Atom]:
    return iter(self.atoms)

  def __len__(self) -> int:
    return len(self.atoms)

  def has_atom(self, name: str) -> bool:
    return name in self._by_name

  def get_neighbour(self, offset: int) -> Optional['Residue']:
    if offset == -1:
      return self.previous
    if offset == 1:
      return self.next
    raise ValueError(f'Expected an offset of -1 or +1, found {offset}.')

  def __str__(self) -> str:
    return f'{self.residue_type.value}{self.index}'

  __repr__ = __str__


class Chain:
  """A linear chain of residues and the covalent bonds between their atoms.

  Bonds come from each residue's own bond list, the peptide bond between the
  carbonyl carbon of residue `i` and the amide nitrogen of residue `i + 1`,
  and any `extra_bonds` (e.g. disulfide bridges).
  """

  def __init__(self,
               residues: Sequence[Residue],
               extra_bonds: Iterable[Tuple[Atom, Atom]] = ()):
    if len(residues) < 2:
      raise ValueError('A chain needs at least two residues.')
    self.residues: List[Residue] = list(residues)
    for i, residue in enumerate(self.residues):
      residue.index = i
      residue.previous = self.residues[i - 1] if i > 0 else None
      residue.next = (self.residues[i + 1]
                      if i + 1 < len(self.residues) else None)
      residue.terminal_status = TerminalStatus.NONE
    self.residues[0].terminal_status = TerminalStatus.NTERM
    self.residues[-1].terminal_status = TerminalStatus.CTERM

    self._atoms: Tuple[Atom, ...] = tuple(
        atom for residue in self.residues for atom in residue)
    self._flat_index: Dict[Atom, int] = {
        atom: i for i, atom in enumerate(self._atoms)}
    self._neighbors: Dict[Atom, List[Atom]] = {a: [] for a in self._atoms}

    for residue in self.residues:
      for name1, name2 in residue.bonds:
        self._add_bond(residue[name1], residue[name2])
      if (residue.next is not None and residue.has_atom('C') and
          residue.next.has_atom('N')):
        self._add_bond(residue['C'], residue.next['N'])
    for atom1, atom2 in extra_bonds:
      self._add_bond(atom1, atom2)

  def _add_bond(self, atom1: Atom, atom2: Atom):
    if atom1 is atom2:
      raise ValueError(f'Cannot bond {atom1} to itself.')
    for atom in (atom1, atom2):
      if atom not in self._neighbors:
        raise ValueError(f'Atom {atom} does not belong to this chain.')
    if atom2 in self._neighbors[atom1]:
      return
    self._neighbors[atom1].append(atom2)
    self._neighbors[atom2].append(atom1)

  def __len__(self) -> int:
    return len(self.residues)

  def __iter__(self) -> Iterator[Residue]:
    return iter(self.residues)

  def __getitem__(self, i: int) -> Residue:
    return self.residues[i]

  @property
  def atoms(self) -> Tuple[Atom, ...]:
    """All atoms, residue by residue, in residue atom order."""
    return self._atoms

  def flat_index(self, atom: Atom) -> int:
    return self._flat_index[atom]

  def neighbors(self, atom: Atom) -> Tuple[Atom, ...]:
    """Atoms directly bonded to `atom`, in bond insertion order."""
    return tuple(self._neighbors[atom])

  def bonds(self) -> Iterator[Tuple[Atom, Atom]]:
    """Yields every bond once, ordered by the position of its first atom."""
    for atom1 in self._atoms:
      for atom2 in self._neighbors[atom1]:
        if is_ordered(atom1, atom2):
          yield atom1, atom2

  def _walk(self, atom: Atom,
            max_distance: Optional[int] = None) -> Iterator[Tuple[Atom, int]]:
    """Breadth-first `(atom, distance)` pairs, starting with `(atom, 0)`."""
    seen = {atom}
    queue = collections.deque([(atom, 0)])
    while queue:
      current, depth = queue.popleft()
      yield current, depth
      if max_distance is not None and depth >= max_distance:
        continue
      for neighbor in self._neighbors[current]:
        if neighbor not in seen:
          seen.add(neighbor)
          queue.append((neighbor, depth + 1))

  def neighborhood(self, atom: Atom, max_distance: int) -> Dict[Atom, int]:
    """Distances from `atom` to every atom at most `max_distance` bonds away.

    Equivalent to calling `distance` for every atom within the cutoff.
    """
    return dict(self._walk(atom, max_distance))

  def distance(self, atom1: Atom, atom2: Atom) -> int:
    """Number of bonds on the shortest path between two atoms.

    Returns 0 for the same atom and `UNREACHABLE` when no path exists.
    """
    for current, depth in self._walk(atom1):
      if current is atom2:
        return depth
    return UNREACHABLE

  def positions(self) -> Optional[onp.ndarray]:
    """`[n_atoms, 3]` array of positions, or None if any atom has none."""
    if any(atom.position is None for atom in self._atoms):
      return None
    return onp.stack([onp.asarray(a.position, dtype=onp.float64)
                      for a in self._atoms])


def is_ordered(atom1: Atom, atom2: Atom) -> bool:
  """Canonical order: residue index, then index within the residue."""
  return ((atom1.residue.index, atom1.index) <
          (atom2.residue.index, atom2.index))
