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

"""Tests for charmm_eef1.cmap."""

from absl.testing import absltest
from absl.testing import parameterized

import jax

from charmm_eef1 import cmap
from charmm_eef1 import residues
from charmm_eef1 import test_util
from charmm_eef1.errors import CmapClassError

jax.config.parse_flags_with_absl()


class CmapTest(test_util.CharmmTestCase):

  def test_class_lookup(self):
    self.assertEqual(cmap.cmap_class(('C', 'NH1', 'CT1', 'C', 'NH1')), 0)
    self.assertEqual(cmap.cmap_class(['C', 'NH1', 'CT2', 'C', 'N']), 5)
    self.assertIsNone(cmap.cmap_class(('C', 'NH1', 'CT3', 'C', 'NH1')))
    self.assertIsNone(cmap.cmap_class(('NH1', 'C', 'CT1', 'NH1', 'C')))

  @parameterized.named_parameters(
      ('alanine', 'AAA', [0]),
      ('before_proline', 'AAPA', [1, 2]),
      ('proline', 'APA', [2]),
      ('proline_pair', 'APPA', [3, 2]),
      ('glycine', 'AGA', [4]),
      ('glycine_before_proline', 'AGPA', [5, 2]),
  )
  def test_classes(self, sequence, expected):
    chain = residues.build_chain(sequence)
    records = cmap.assign_cmap(chain)
    self.assertEqual([r.cmap_type_index for r in records], expected)
    self.assertEqual([r.residue_index for r in records],
                     list(range(1, len(sequence) - 1)))

  def test_terminal_residues_skipped(self):
    self.assertEqual(cmap.assign_cmap(residues.build_chain('AG')), ())

  def test_backbone_atoms(self):
    chain = residues.build_chain('AGA')
    (record,) = cmap.assign_cmap(chain)
    self.assertIs(record.residue, chain[1])
    self.assertEqual(record.atoms, (chain[0]['C'], chain[1]['N'],
                                    chain[1]['CA'], chain[1]['C'],
                                    chain[2]['N']))

  def test_unknown_class(self):
    stub = 'N NH1 0.0 14.0  CA CT3 0.0 12.0  C C 0.0 12.0'
    chain = test_util.toy_chain([stub] * 3, ['N CA  CA C'] * 3)
    with self.assertRaises(CmapClassError) as cm:
      cmap.assign_cmap(chain)
    self.assertEqual(cm.exception.kind, 'cmap')
    self.assertEqual(cm.exception.types, ('C', 'NH1', 'CT3', 'C', 'NH1'))


if __name__ == '__main__':
  absltest.main()
