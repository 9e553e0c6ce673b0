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

"""Parameter tables for the CHARMM36/EEF1-SB force field.

Tables are built once from pre-tokenized records (one sequence of fields per
row, in the column order of the GROMACS charmm36 `.itp` files) and are
immutable afterwards. Every table is a tuple in file order; lookups scan it
linearly and the first matching entry wins.
"""

import enum
import math
from types import MappingProxyType
from typing import (Any, Callable, Mapping, NamedTuple, Optional, Sequence,
                    Tuple, Union)

import numpy as onp

from charmm_eef1 import util
from charmm_eef1.base import WILDCARD_TOKEN
from charmm_eef1.errors import ParameterRecordError


# Types


class Wildcard(enum.Enum):
  """Type label that matches any concrete atom type.

  Being an enum member it never compares equal to a concrete type string,
  even one spelled `'X'`.
  """
  X = WILDCARD_TOKEN

  def __str__(self) -> str:
    return self.value


WILDCARD = Wildcard.X

TypeLabel = Union[str, Wildcard]
Row = Sequence[Any]


def is_wildcard(label: TypeLabel) -> bool:
  return label is WILDCARD


# Records


class BondedPairParameter(NamedTuple):
  """Harmonic bond parameter.

  Attributes:
      type1, type2: Atom types.
      r0: Equilibrium length.
      kb: Force constant.
  """
  type1: str
  type2: str
  r0: float
  kb: float

  @property
  def types(self) -> Tuple[TypeLabel, ...]:
    return (self.type1, self.type2)


class AngleBendParameter(NamedTuple):
  """Urey-Bradley angle parameter.

  Attributes:
      type1, type2, type3: Atom types, `type2` is the vertex.
      theta0: Equilibrium angle (degrees).
      k0: Angle force constant.
      r13: Urey-Bradley equilibrium 1-3 distance.
      kub: Urey-Bradley force constant.
  """
  type1: str
  type2: str
  type3: str
  theta0: float
  k0: float
  r13: float
  kub: float

  @property
  def types(self) -> Tuple[TypeLabel, ...]:
    return (self.type1, self.type2, self.type3)


class TorsionParameter(NamedTuple):
  """Periodic proper dihedral term.

  Attributes:
      type1, type2, type3, type4: Atom types, outer positions may be
          `WILDCARD`.
      phi0: Phase (degrees).
      cp: Force constant.
      mult: Multiplicity.
  """
  type1: TypeLabel
  type2: TypeLabel
  type3: TypeLabel
  type4: TypeLabel
  phi0: float
  cp: float
  mult: int

  @property
  def types(self) -> Tuple[TypeLabel, ...]:
    return (self.type1, self.type2, self.type3, self.type4)


class ImproperTorsionParameter(NamedTuple):
  """Harmonic improper dihedral term.

  Attributes:
      type1, type2, type3, type4: Atom types, inner positions may be
          `WILDCARD`.
      phi0: Equilibrium angle (degrees).
      cp: Force constant.
  """
  type1: TypeLabel
  type2: TypeLabel
  type3: TypeLabel
  type4: TypeLabel
  phi0: float
  cp: float

  @property
  def types(self) -> Tuple[TypeLabel, ...]:
    return (self.type1, self.type2, self.type3, self.type4)


class NonBondedParameter(NamedTuple):
  """Per-type Lennard-Jones parameter."""
  atom_type: str
  atom_number: int
  mass: float
  charge: float
  ptype: str
  sigma: float
  epsilon: float


class NonBonded14Parameter(NamedTuple):
  """Explicit Lennard-Jones parameter for a 1-4 pair of types."""
  type1: str
  type2: str
  pair_function: int
  sigma: float
  epsilon: float

  @property
  def types(self) -> Tuple[TypeLabel, ...]:
    return (self.type1, self.type2)


# Field converters


def _concrete_type(token: Any) -> str:
  if not isinstance(token, str) or not token:
    raise ValueError(f'expected an atom type, found {token!r}')
  if token == WILDCARD_TOKEN:
    raise ValueError('wildcard type is not allowed in this table')
  return token


def _type_label(token: Any) -> TypeLabel:
  if token is WILDCARD or token == WILDCARD_TOKEN:
    return WILDCARD
  return _concrete_type(token)


def _integer(token: Any) -> int:
  value = float(token)
  if not value.is_integer():
    raise ValueError(f'expected an integer, found {token!r}')
  return int(value)


def _string(token: Any) -> str:
  return str(token)


# Each layout lists (source column, converter) for the record fields in order.
_Layout = Tuple[Tuple[int, Callable[[Any], Any]], ...]

_BONDED_PAIR_LAYOUT: _Layout = (
    (0, _concrete_type), (1, _concrete_type), (3, float), (4, float))

_ANGLE_BEND_LAYOUT: _Layout = (
    (0, _concrete_type), (1, _concrete_type), (2, _concrete_type),
    (4, float), (5, float), (6, float), (7, float))

_TORSION_LAYOUT: _Layout = (
    (0, _type_label), (1, _type_label), (2, _type_label), (3, _type_label),
    (5, float), (6, float), (7, _integer))

_IMPROPER_TORSION_LAYOUT: _Layout = (
    (0, _type_label), (1, _type_label), (2, _type_label), (3, _type_label),
    (5, float), (6, float))

_NON_BONDED_LAYOUT: _Layout = (
    (0, _concrete_type), (1, _integer), (2, float), (3, float), (4, _string),
    (5, float), (6, float))

_NON_BONDED_14_LAYOUT: _Layout = (
    (0, _concrete_type), (1, _concrete_type), (2, _integer), (3, float),
    (4, float))


def _load(kind: str, rows: Sequence[Row], record_cls, layout: _Layout):
  n_columns = max(column for column, _ in layout) + 1
  records = []
  for i, row in enumerate(rows):
    if isinstance(row, str):
      raise ParameterRecordError(kind, i, [row], 'expected tokenized fields')
    row = tuple(row)
    if len(row) < n_columns:
      raise ParameterRecordError(
          kind, i, row, f'expected at least {n_columns} fields, found {len(row)}')
    try:
      values = [convert(row[column]) for column, convert in layout]
    except (TypeError, ValueError) as e:
      raise ParameterRecordError(kind, i, row, str(e)) from e
    records.append(record_cls(*values))
  return tuple(records)


# Loaders


def load_bonded_pair_parameters(
    rows: Sequence[Row]) -> Tuple[BondedPairParameter, ...]:
  """Loads bond rows `type1 type2 func r0 kb`."""
  return _load('bond', rows, BondedPairParameter, _BONDED_PAIR_LAYOUT)


def load_angle_bend_parameters(
    rows: Sequence[Row]) -> Tuple[AngleBendParameter, ...]:
  """Loads angle rows `type1 type2 type3 func theta0 k0 r13 kub`."""
  return _load('angle', rows, AngleBendParameter, _ANGLE_BEND_LAYOUT)


def load_torsion_parameters(
    rows: Sequence[Row]) -> Tuple[TorsionParameter, ...]:
  """Loads dihedral rows `type1 type2 type3 type4 func phi0 cp mult`."""
  return _load('torsion', rows, TorsionParameter, _TORSION_LAYOUT)


def load_improper_torsion_parameters(
    rows: Sequence[Row]) -> Tuple[ImproperTorsionParameter, ...]:
  """Loads improper rows `type1 type2 type3 type4 func phi0 cp`."""
  return _load('improper', rows, ImproperTorsionParameter,
               _IMPROPER_TORSION_LAYOUT)


def load_non_bonded_parameters(
    rows: Sequence[Row]) -> Tuple[NonBondedParameter, ...]:
  """Loads atom type rows `type at.num mass charge ptype sigma epsilon`."""
  return _load('nonbonded', rows, NonBondedParameter, _NON_BONDED_LAYOUT)


def load_non_bonded_14_parameters(
    rows: Sequence[Row]) -> Tuple[NonBonded14Parameter, ...]:
  """Loads pair rows `type1 type2 func sigma epsilon`."""
  return _load('nonbonded-14', rows, NonBonded14Parameter,
               _NON_BONDED_14_LAYOUT)


class ParameterSet(NamedTuple):
  """All parameter tables of one force field definition.

  Attributes:
      bonded_pairs: Bond table.
      angle_bends: Angle table.
      torsions: Proper dihedral table.
      improper_torsions: Improper dihedral table.
      non_bonded: Per-type Lennard-Jones table.
      non_bonded_14: Explicit 1-4 Lennard-Jones table.
  """

  bonded_pairs: Tuple[BondedPairParameter, ...] = ()
  angle_bends: Tuple[AngleBendParameter, ...] = ()
  torsions: Tuple[TorsionParameter, ...] = ()
  improper_torsions: Tuple[ImproperTorsionParameter, ...] = ()
  non_bonded: Tuple[NonBondedParameter, ...] = ()
  non_bonded_14: Tuple[NonBonded14Parameter, ...] = ()

  @classmethod
  def from_rows(cls,
                bonded_pairs: Sequence[Row] = (),
                angle_bends: Sequence[Row] = (),
                torsions: Sequence[Row] = (),
                improper_torsions: Sequence[Row] = (),
                non_bonded: Sequence[Row] = (),
                non_bonded_14: Sequence[Row] = ()) -> 'ParameterSet':
    return cls(
        bonded_pairs=load_bonded_pair_parameters(bonded_pairs),
        angle_bends=load_angle_bend_parameters(angle_bends),
        torsions=load_torsion_parameters(torsions),
        improper_torsions=load_improper_torsion_parameters(improper_torsions),
        non_bonded=load_non_bonded_parameters(non_bonded),
        non_bonded_14=load_non_bonded_14_parameters(non_bonded_14),
    )


# Implicit solvent (EEF1)


class SolvationTables(NamedTuple):
  """EEF1 lookup tables indexed by solvation type.

  Attributes:
      type_index: Read-only mapping from atom type to row index.
      volume: Atomic volume per index.
      dg_ref: Reference solvation free energy per index.
      dg_free: Free solvation free energy per index.
      vdw_radius: Van der Waals radius per index.
      screening_length: Correlation length (lambda) per index.
      factors: `[n, n]` matrix; `factors[i, j]` is the desolvation prefactor
          of an atom of index `i` by an atom of index `j`.
  """

  type_index: Mapping[str, int]
  volume: onp.ndarray
  dg_ref: onp.ndarray
  dg_free: onp.ndarray
  vdw_radius: onp.ndarray
  screening_length: onp.ndarray
  factors: onp.ndarray

  @classmethod
  def from_atom_parameters(cls,
                           atom_types: Sequence[str],
                           volume: Sequence[float],
                           dg_ref: Sequence[float],
                           dg_free: Sequence[float],
                           screening_length: Sequence[float],
                           vdw_radius: Sequence[float],
                           factors: Optional[Sequence[Sequence[float]]] = None
                           ) -> 'SolvationTables':
    """Builds frozen tables from per-type EEF1 constants.

    When `factors` is not given it is computed from the Gaussian solvent
    exclusion model,

      `factors[i, j] = dg_free[i] * volume[j] / (2 pi^(3/2) lambda[i])`.
    """
    n = len(atom_types)
    if len(set(atom_types)) != n:
      raise ValueError('Solvation atom types must be unique.')
    columns = {'volume': volume, 'dg_ref': dg_ref, 'dg_free': dg_free,
               'screening_length': screening_length, 'vdw_radius': vdw_radius}
    for name, column in columns.items():
      if len(column) != n:
        raise ValueError(
            f'{name} has wrong length: {len(column)} != {n}')

    volume = onp.asarray(volume, dtype=onp.float64)
    dg_free = onp.asarray(dg_free, dtype=onp.float64)
    screening_length = onp.asarray(screening_length, dtype=onp.float64)
    if onp.any(screening_length <= 0):
      raise ValueError('screening_length must be positive.')

    if factors is None:
      factors = (dg_free[:, None] * volume[None, :] /
                 (2.0 * math.pi ** 1.5 * screening_length[:, None]))
    factors = onp.asarray(factors, dtype=onp.float64)
    if factors.shape != (n, n):
      raise ValueError(f'factors must have shape ({n}, {n}), '
                       f'got {factors.shape}')

    return cls(
        type_index=MappingProxyType({t: i for i, t in enumerate(atom_types)}),
        volume=util.read_only(volume),
        dg_ref=util.read_only(dg_ref),
        dg_free=util.read_only(dg_free),
        vdw_radius=util.read_only(vdw_radius),
        screening_length=util.read_only(screening_length),
        factors=util.read_only(factors),
    )


class SolvationParameter(NamedTuple):
  """Per-type EEF1 constants as read from a solvation table."""
  atom_type: str
  volume: float
  dg_ref: float
  dg_free: float
  screening_length: float
  vdw_radius: float


_SOLVATION_LAYOUT: _Layout = (
    (0, _concrete_type), (1, float), (2, float), (3, float), (4, float),
    (5, float))


def load_solvation_parameters(rows: Sequence[Row]) -> SolvationTables:
  """Loads EEF1 rows `type volume dg_ref dg_free lambda radius`."""
  records = _load('solvation', rows, SolvationParameter, _SOLVATION_LAYOUT)
  return SolvationTables.from_atom_parameters(
      atom_types=[r.atom_type for r in records],
      volume=[r.volume for r in records],
      dg_ref=[r.dg_ref for r in records],
      dg_free=[r.dg_free for r in records],
      screening_length=[r.screening_length for r in records],
      vdw_radius=[r.vdw_radius for r in records])
