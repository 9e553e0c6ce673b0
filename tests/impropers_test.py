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

"""Tests for charmm_eef1.impropers."""

from absl.testing import absltest
from absl.testing import parameterized

import jax

from charmm_eef1 import impropers
from charmm_eef1 import params
from charmm_eef1 import residues
from charmm_eef1 import test_util
from charmm_eef1.errors import (MissingAtomError, MissingParameterError,
                                ProtonationStateError)
from charmm_eef1.impropers import HistidineState
from charmm_eef1.structure import ResidueType

jax.config.parse_flags_with_absl()


BACKBONE_ONLY = ('N NH1 -0.47 14.007  CA CT2 -0.02 12.011  C C 0.51 12.011 '
                 'O O -0.51 15.999')
BACKBONE_ONLY_BONDS = 'N CA  CA C  C O'


class SideChainTest(test_util.CharmmTestCase):

  @parameterized.named_parameters(
      ('ALA', 'ALA', 0),
      ('ARG', 'ARG', 1),
      ('ASN', 'ASN', 4),
      ('ASP', 'ASP', 1),
      ('GLN', 'GLN', 4),
      ('GLU', 'GLU', 1),
      ('HSD', 'HSD', 6),
      ('HSE', 'HSE', 6),
      ('HSP', 'HSP', 4),
      ('TRP', 'TRP', 0),
  )
  def test_side_chain_counts(self, name, expected):
    chain = residues.build_chain(['ALA', name, 'ALA'])
    self.assertLen(impropers.side_chain_quadruples(chain[1]), expected)

  @parameterized.named_parameters(
      [(name, name) for name in sorted(residues.TEMPLATES)])
  def test_side_chain_atoms_exist(self, name):
    chain = residues.build_chain(['ALA', name, 'ALA'])
    for quadruple in impropers.side_chain_quadruples(chain[1]):
      for atom_name in quadruple:
        self.assertTrue(chain[1].has_atom(atom_name), atom_name)

  def test_every_residue_type_has_a_table(self):
    for residue_type in ResidueType:
      if residue_type is ResidueType.HIS:
        continue
      self.assertIn(residue_type, impropers.SIDE_CHAIN_IMPROPERS)

  @parameterized.named_parameters(
      ('HSD', 'HSD', HistidineState.HSD),
      ('HSE', 'HSE', HistidineState.HSE),
      ('HSP', 'HSP', HistidineState.HSP),
  )
  def test_histidine_state(self, template, expected):
    chain = residues.build_chain('AHA', histidine=template)
    self.assertIs(impropers.histidine_state(chain[1]), expected)

  def test_histidine_without_ring_protons(self):
    residue = test_util.toy_residue(
        'N NH1 0.0 14.0  CA CT1 0.0 12.0  C C 0.0 12.0',
        residue_type=ResidueType.HIS)
    with self.assertRaises(ProtonationStateError) as cm:
      impropers.side_chain_quadruples(residue)
    self.assertIs(cm.exception.residue, residue)
    self.assertEqual(cm.exception.kind, 'improper')


class BackboneTest(test_util.CharmmTestCase):

  def test_terminal_rules(self):
    chain = residues.build_chain('AGA')
    first, middle, last = (impropers.backbone_quadruples(r) for r in chain)
    self.assertLen(first, 1)
    self.assertNames(first[0], ('C', 'CA', 'N', 'O'))
    self.assertIs(first[0][2], chain[1]['N'])

    self.assertLen(middle, 2)
    self.assertNames(middle[0], ('N', 'C', 'CA', 'HN'))
    self.assertIs(middle[0][1], chain[0]['C'])
    self.assertNames(middle[1], ('C', 'CA', 'N', 'O'))
    self.assertIs(middle[1][2], chain[2]['N'])

    self.assertLen(last, 2)
    self.assertNames(last[1], ('C', 'CA', 'OXT', 'O'))

  def test_proline_uses_cd(self):
    chain = residues.build_chain('APA')
    amide = impropers.backbone_quadruples(chain[1])[0]
    self.assertNames(amide, ('N', 'C', 'CA', 'CD'))

  def test_missing_amide_hydrogen(self):
    chain = test_util.toy_chain([BACKBONE_ONLY] * 3,
                                [BACKBONE_ONLY_BONDS] * 3)
    with self.assertRaises(MissingAtomError) as cm:
      impropers.backbone_quadruples(chain[1])
    self.assertEqual(cm.exception.name, 'HN')
    self.assertIs(cm.exception.residue, chain[1])


class AssignImproperTest(test_util.CharmmTestCase):

  def setUp(self):
    super().setUp()
    self.parameters = test_util.mini_parameter_set()

  def test_ala_gly_ala(self):
    chain = residues.build_chain('AGA')
    records = impropers.assign_improper_torsions(
        chain, self.parameters.improper_torsions)
    self.assertLen(records, 5)
    # Residue by residue, side chain first, amide before carbonyl.
    self.assertEqual([r.atom1.residue.index for r in records],
                     [0, 1, 1, 2, 2])
    self.assertTypes(records[1][:4], ('NH1', 'C', 'CT2', 'H'))
    self.assertAlmostEqual(records[1].cp, 167.36)
    self.assertTypes(records[4][:4], ('CC', 'CT1', 'OC', 'OC'))
    self.assertAlmostEqual(records[4].cp, 803.328)

  def test_reverse_match_keeps_atom_order(self):
    chain = residues.build_chain('AGA')
    records = impropers.assign_improper_torsions(
        chain, self.parameters.improper_torsions)
    # Matched through `O X X C`.
    self.assertNames(records[0][:4], ('C', 'CA', 'N', 'O'))
    self.assertAlmostEqual(records[0].cp, 1004.16)

  def test_resolve_stage_order(self):
    chain = residues.build_chain('AGA')
    atoms = impropers.backbone_quadruples(chain[1])[0]
    table = params.load_improper_torsion_parameters(
        [('H', 'X', 'X', 'NH1', '2', '0.0', '1.0'),
         ('NH1', 'X', 'X', 'H', '2', '0.0', '2.0'),
         ('H', 'CT2', 'C', 'NH1', '2', '0.0', '3.0')])
    self.assertEqual(impropers.resolve_improper(atoms, table).cp, 3.0)
    self.assertEqual(impropers.resolve_improper(atoms, table[:2]).cp, 2.0)
    self.assertEqual(impropers.resolve_improper(atoms, table[:1]).cp, 1.0)

  def test_missing_improper(self):
    chain = residues.build_chain('AGA')
    table = tuple(p for p in self.parameters.improper_torsions
                  if p.type1 != 'OC')
    with self.assertRaises(MissingParameterError) as cm:
      impropers.assign_improper_torsions(chain, table)
    self.assertEqual(cm.exception.kind, 'improper')
    self.assertEqual(cm.exception.types, ('CC', 'CT1', 'OC', 'OC'))


if __name__ == '__main__':
  absltest.main()
