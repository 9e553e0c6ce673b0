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

"""End to end assignment of a capped Ala-Gly-Ala chain."""

from absl.testing import absltest

import jax

import charmm_eef1
from charmm_eef1 import params
from charmm_eef1 import residues
from charmm_eef1 import test_util
from charmm_eef1.assign import Assignment, assign
from charmm_eef1.base import AssignmentOptions
from charmm_eef1.errors import MissingParameterError
from charmm_eef1.residues import ELEMENT_MASS

jax.config.parse_flags_with_absl()


class AssignTest(test_util.CharmmTestCase):

  def setUp(self):
    super().setUp()
    self.parameters = test_util.mini_parameter_set()
    self.solvation = test_util.mini_solvation_tables()
    self.chain = residues.build_chain('AGA')

  def test_summary(self):
    result = assign(self.chain, self.parameters, self.solvation)
    self.assertIsInstance(result, Assignment)
    self.assertTrue(result.complete)
    self.assertEqual(result.summary(), {
        'bond': 29,
        'angle': 51,
        'torsion': 71,
        'improper': 5,
        'nonbonded': 355,
        'nonbonded_14': 65,
        'cmap': 1,
        'missing_torsion': 0,
    })

  def test_package_entry_point(self):
    result = charmm_eef1.assign(self.chain, self.parameters, self.solvation)
    self.assertLen(result.bonded_pairs, 29)
    self.assertIs(result.chain, self.chain)

  def test_cmap(self):
    result = assign(self.chain, self.parameters, self.solvation)
    (record,) = result.cmap
    self.assertEqual(record.residue_index, 1)
    self.assertEqual(record.cmap_type_index, 4)

  def test_solvation_factors(self):
    result = assign(self.chain, self.parameters, self.solvation)
    hydrogen = ELEMENT_MASS['H']
    for p in result.non_bonded:
      heavy = p.atom1.mass != hydrogen and p.atom2.mass != hydrogen
      self.assertEqual(p.do_eef1, heavy and not p.is_14,
                       f'{p.atom1} {p.atom2}')

  def test_without_solvation(self):
    result = assign(self.chain, self.parameters)
    self.assertLen(result.non_bonded, 355)
    self.assertFalse(any(p.do_eef1 for p in result.non_bonded))

  def test_explicit_14_pair(self):
    result = assign(self.chain, self.parameters, self.solvation)
    c1, cb2 = self.chain[1]['C'], self.chain[2]['CB']
    (pair,) = [p for p in result.non_bonded
               if p.atom1 is c1 and p.atom2 is cb2]
    self.assertTrue(pair.is_14)
    self.assertAlmostEqual(pair.c6, 4.0 * 0.04184 * 0.33854145 ** 6)

  def test_incomplete_torsions(self):
    parameters = self.parameters._replace(torsions=tuple(
        p for p in self.parameters.torsions
        if not (params.is_wildcard(p.type1) and 'CT2' in (p.type2, p.type3))))
    result = assign(self.chain, parameters, self.solvation)
    self.assertFalse(result.complete)
    # Central bonds N-CA and CA-C of the glycine.
    self.assertLen(result.torsion_diagnostics, 12)
    self.assertEqual(result.summary()['missing_torsion'], 12)

  def test_strict_torsions(self):
    parameters = self.parameters._replace(torsions=())
    with self.assertRaises(MissingParameterError):
      assign(self.chain, parameters, self.solvation,
             AssignmentOptions(strict_torsions=True))

  def test_missing_bond_is_fatal(self):
    parameters = self.parameters._replace(bonded_pairs=())
    with self.assertRaises(charmm_eef1.AssignmentError) as cm:
      assign(self.chain, parameters, self.solvation)
    self.assertEqual(cm.exception.kind, 'bond')


if __name__ == '__main__':
  absltest.main()
