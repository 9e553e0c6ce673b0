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

"""Packs an `Assignment` into arrays for a vectorized energy function."""

from typing import NamedTuple

import jax.numpy as jnp

from charmm_eef1 import util
from charmm_eef1.assign import Assignment

Array = util.Array


class Topology(NamedTuple):
  """Interaction indices and constants as arrays.

  Atom indices refer to the flattened atom order of the chain. Per-term
  arrays have the leading dimension of the matching index array.

  Attributes:
      n_atoms: Number of atoms.
      charges: `[n_atoms]` partial charges.
      bonds: `[n_bonds, 2]`.
      bond_r0, bond_kb: Bond constants.
      angles: `[n_angles, 3]`.
      angle_theta0, angle_k0, angle_r13, angle_kub: Angle constants.
      torsions: `[n_torsions, 4]`.
      torsion_phi0, torsion_cp, torsion_mult: Torsion constants.
      impropers: `[n_impropers, 4]`.
      improper_phi0, improper_cp: Improper constants.
      pairs: `[n_pairs, 2]` non-bonded pairs.
      pair_qq, pair_c6, pair_c12: Non-bonded constants.
      pair_14_mask: `[n_pairs]` True for 1-4 pairs.
      solvation_mask: `[n_pairs]` True for pairs with EEF1 factors.
      fac_12, fac_21, vdw_radius1, vdw_radius2, lambda1, lambda2: EEF1
          constants, zero where `solvation_mask` is False.
      cmap_atoms: `[n_cmap, 5]` backbone atoms of each CMAP residue.
      cmap_type: `[n_cmap]` class indices.
  """

  n_atoms: int
  charges: Array
  bonds: Array
  bond_r0: Array
  bond_kb: Array
  angles: Array
  angle_theta0: Array
  angle_k0: Array
  angle_r13: Array
  angle_kub: Array
  torsions: Array
  torsion_phi0: Array
  torsion_cp: Array
  torsion_mult: Array
  impropers: Array
  improper_phi0: Array
  improper_cp: Array
  pairs: Array
  pair_qq: Array
  pair_c6: Array
  pair_c12: Array
  pair_14_mask: Array
  solvation_mask: Array
  fac_12: Array
  fac_21: Array
  vdw_radius1: Array
  vdw_radius2: Array
  lambda1: Array
  lambda2: Array
  cmap_atoms: Array
  cmap_type: Array


def create_topology(assignment: Assignment) -> Topology:
  """Converts interaction records to index and constant arrays.

  Args:
      assignment: Result of `charmm_eef1.assign`.

  Returns:
      Topology with one row per interaction record, in record order.
  """
  chain = assignment.chain
  index = chain.flat_index

  def rows(records, n):
    return util.index_array(
        [[index(getattr(r, f'atom{k + 1}')) for k in range(n)]
         for r in records], n)

  def column(records, name, dtype=util.f32):
    return util.value_array([getattr(r, name) for r in records], dtype)

  bonds = assignment.bonded_pairs
  angles = assignment.angle_bends
  torsions = assignment.torsions
  impropers = assignment.improper_torsions
  pairs = assignment.non_bonded

  def solvation_column(name):
    return util.value_array(
        [getattr(p.solvation, name) if p.solvation is not None else 0.0
         for p in pairs])

  return Topology(
      n_atoms=len(chain.atoms),
      charges=util.value_array([a.charge for a in chain.atoms]),
      bonds=rows(bonds, 2),
      bond_r0=column(bonds, 'r0'),
      bond_kb=column(bonds, 'kb'),
      angles=rows(angles, 3),
      angle_theta0=jnp.radians(column(angles, 'theta0')),
      angle_k0=column(angles, 'k0'),
      angle_r13=column(angles, 'r13'),
      angle_kub=column(angles, 'kub'),
      torsions=rows(torsions, 4),
      torsion_phi0=jnp.radians(column(torsions, 'phi0')),
      torsion_cp=column(torsions, 'cp'),
      torsion_mult=column(torsions, 'mult', util.i32),
      impropers=rows(impropers, 4),
      improper_phi0=jnp.radians(column(impropers, 'phi0')),
      improper_cp=column(impropers, 'cp'),
      pairs=rows(pairs, 2),
      pair_qq=column(pairs, 'qq'),
      pair_c6=column(pairs, 'c6'),
      pair_c12=column(pairs, 'c12'),
      pair_14_mask=column(pairs, 'is_14', bool),
      solvation_mask=util.value_array(
          [p.solvation is not None for p in pairs], bool),
      fac_12=solvation_column('fac_12'),
      fac_21=solvation_column('fac_21'),
      vdw_radius1=solvation_column('vdw_radius1'),
      vdw_radius2=solvation_column('vdw_radius2'),
      lambda1=solvation_column('lambda1'),
      lambda2=solvation_column('lambda2'),
      cmap_atoms=util.index_array(
          [[index(a) for a in c.atoms] for c in assignment.cmap], 5),
      cmap_type=column(assignment.cmap, 'cmap_type_index', util.i32),
  )


def validate_topology(topology: Topology) -> None:
  """Validate topology data structures.

  Args:
      topology: Topology to validate.

  Raises:
      ValueError: If topology is invalid.
  """
  n = topology.n_atoms

  index_arrays = {
      'bonds': (topology.bonds, 2,
                ('bond_r0', 'bond_kb')),
      'angles': (topology.angles, 3,
                 ('angle_theta0', 'angle_k0', 'angle_r13', 'angle_kub')),
      'torsions': (topology.torsions, 4,
                   ('torsion_phi0', 'torsion_cp', 'torsion_mult')),
      'impropers': (topology.impropers, 4,
                    ('improper_phi0', 'improper_cp')),
      'pairs': (topology.pairs, 2,
                ('pair_qq', 'pair_c6', 'pair_c12', 'pair_14_mask',
                 'solvation_mask', 'fac_12', 'fac_21', 'vdw_radius1',
                 'vdw_radius2', 'lambda1', 'lambda2')),
      'cmap_atoms': (topology.cmap_atoms, 5, ('cmap_type',)),
  }

  if topology.charges.shape != (n,):
    raise ValueError(
        f'charges must have shape ({n},), got {topology.charges.shape}')

  for name, (idx, width, constants) in index_arrays.items():
    if idx.ndim != 2 or idx.shape[1] != width:
      raise ValueError(
          f'{name} must have shape (n_{name}, {width}), got {idx.shape}')
    for constant in constants:
      values = getattr(topology, constant)
      if values.shape != (idx.shape[0],):
        raise ValueError(
            f'{constant} has wrong length: {values.shape} != '
            f'({idx.shape[0]},)')
    if idx.size > 0:
      max_idx = int(jnp.max(idx))
      min_idx = int(jnp.min(idx))
      if max_idx >= n or min_idx < 0:
        raise ValueError(
            f'{name} indices out of range [0, {n}): {min_idx}..{max_idx}')

  if topology.pairs.shape[0] > 0:
    if bool(jnp.any(topology.pair_14_mask & topology.solvation_mask)):
      raise ValueError('1-4 pairs must not carry solvation factors.')
