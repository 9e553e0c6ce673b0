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

"""Error types raised while loading tables and assigning parameters."""

from typing import Any, Optional, Sequence, Tuple


class ParameterRecordError(ValueError):
  """A parameter record could not be converted to a table entry.

  Attributes:
    kind: Interaction kind of the table being loaded (e.g. `'angle'`).
    row: Zero based position of the offending record.
    fields: The raw fields of the record.
  """

  def __init__(self, kind: str, row: int, fields: Sequence[Any], reason: str):
    self.kind = kind
    self.row = row
    self.fields = tuple(fields)
    super().__init__(
        f'Malformed {kind} parameter record {row} {list(self.fields)}: '
        f'{reason}.')


class AssignmentError(ValueError):
  """Base class for failures while assigning parameters to a structure.

  Attributes:
    kind: Interaction kind that failed (`'bond'`, `'angle'`, `'torsion'`,
      `'improper'`, `'nonbonded'`, `'solvation'` or `'cmap'`).
    atoms: Atoms taking part in the failed interaction.
    types: Force field type labels of `atoms`.
    residue: Residue the failure was detected on, if any.
  """

  def __init__(self,
               kind: str,
               message: str,
               atoms: Sequence[Any] = (),
               types: Sequence[str] = (),
               residue: Optional[Any] = None):
    self.kind = kind
    self.atoms: Tuple[Any, ...] = tuple(atoms)
    self.types: Tuple[str, ...] = tuple(types)
    self.residue = residue
    details = []
    if self.atoms:
      details.append('atoms ' + ' '.join(str(a) for a in self.atoms))
    if self.types:
      details.append('types ' + ' '.join(self.types))
    if residue is not None and not self.atoms:
      details.append(f'residue {residue}')
    if details:
      message = f'{message} ({"; ".join(details)})'
    super().__init__(message)


class MissingParameterError(AssignmentError):
  """No table entry, specific or wildcard, matches a present interaction."""

  def __init__(self, kind: str, atoms: Sequence[Any], types: Sequence[str]):
    super().__init__(kind, f'Missing {kind} parameter', atoms, types)


class UnknownResidueError(AssignmentError):
  """The residue type has no entry in the improper torsion templates."""

  def __init__(self, residue: Any):
    super().__init__('improper', 'Unknown residue type', residue=residue)


class ProtonationStateError(AssignmentError):
  """A histidine carries neither tautomeric proton."""

  def __init__(self, residue: Any):
    super().__init__(
        'improper',
        'Unknown histidine protonation state, expected HD1 and/or HE2',
        residue=residue)


class MissingAtomError(AssignmentError):
  """A template refers to an atom the residue does not have."""

  def __init__(self, kind: str, residue: Any, name: str):
    self.name = name
    super().__init__(kind, f'Residue has no atom {name}', residue=residue)


class CmapClassError(AssignmentError):
  """A backbone span matches none of the CMAP classes."""

  def __init__(self, atoms: Sequence[Any], types: Sequence[str]):
    super().__init__('cmap', 'Unknown CMAP class for backbone', atoms, types)
