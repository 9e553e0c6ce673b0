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

"""Tests for charmm_eef1.residues."""

from absl.testing import absltest
from absl.testing import parameterized

import jax

from charmm_eef1 import residues
from charmm_eef1 import test_util
from charmm_eef1.structure import ResidueType, TerminalStatus

jax.config.parse_flags_with_absl()


class TemplateTest(test_util.CharmmTestCase):

  @parameterized.named_parameters(
      [(name, name) for name in sorted(residues.TEMPLATES)])
  def test_bonds_refer_to_template_atoms(self, name):
    template = residues.TEMPLATES[name]
    atom_names = {a.name for a in template.atoms}
    self.assertLen(atom_names, len(template.atoms))
    for name1, name2 in template.bonds:
      self.assertIn(name1, atom_names)
      self.assertIn(name2, atom_names)

  @parameterized.named_parameters(
      ('ALA', 'ALA', 0.0),
      ('GLY', 'GLY', 0.0),
      ('ARG', 'ARG', 1.0),
      ('ASP', 'ASP', -1.0),
      ('HSE', 'HSE', 0.0),
  )
  def test_template_charge(self, name, expected):
    template = residues.TEMPLATES[name]
    self.assertAlmostEqual(sum(a.charge for a in template.atoms), expected,
                           places=6)

  def test_histidine_templates(self):
    for name in ('HSD', 'HSE', 'HSP'):
      self.assertIs(residues.TEMPLATES[name].residue_type, ResidueType.HIS)
    self.assertNotIn('HIS', residues.TEMPLATES)


class BuildChainTest(test_util.CharmmTestCase):

  def test_ala_gly_ala(self):
    chain = residues.build_chain('AGA')
    self.assertEqual([r.residue_type for r in chain],
                     [ResidueType.ALA, ResidueType.GLY, ResidueType.ALA])
    self.assertEqual([len(r) for r in chain], [12, 7, 11])
    self.assertEqual(chain[0].terminal_status, TerminalStatus.NTERM)
    self.assertEqual(chain[2].terminal_status, TerminalStatus.CTERM)
    self.assertAlmostEqual(sum(a.charge for a in chain.atoms), 0.0, places=6)

  def test_n_terminal_patch(self):
    first = residues.build_chain('AG')[0]
    self.assertFalse(first.has_atom('HN'))
    self.assertNames(first.atoms[:4], ('N', 'HT1', 'HT2', 'HT3'))
    self.assertTypes([first['N'], first['CA'], first['HA'], first['HT1']],
                     ('NH3', 'CT1', 'HB1', 'HC'))
    self.assertAlmostEqual(sum(a.charge for a in first), 1.0, places=6)

  def test_glycine_n_terminal_patch(self):
    first = residues.build_chain('GA')[0]
    self.assertEqual(first['N'].atom_type, 'NH3')
    self.assertEqual(first['CA'].atom_type, 'CT2')
    self.assertAlmostEqual(sum(a.charge for a in first), 1.0, places=6)

  def test_proline_n_terminal_patch(self):
    first = residues.build_chain('PA')[0]
    self.assertEqual(first['N'].atom_type, 'NP')
    self.assertTrue(first.has_atom('HN1'))
    self.assertTrue(first.has_atom('HN2'))
    self.assertEqual(first['CD'].atom_type, 'CP3')
    self.assertAlmostEqual(sum(a.charge for a in first), 1.0, places=6)

  def test_c_terminal_patch(self):
    last = residues.build_chain('GA')[1]
    self.assertTypes([last['C'], last['O'], last['OXT']], ('CC', 'OC', 'OC'))
    self.assertAlmostEqual(sum(a.charge for a in last), -1.0, places=6)

  def test_c_terminal_oxygen_bonded(self):
    chain = residues.build_chain('GA')
    last = chain[1]
    self.assertIn(last['OXT'], chain.neighbors(last['C']))

  def test_masses(self):
    chain = residues.build_chain('AG')
    self.assertEqual(chain[0]['HT1'].mass, 1.008)
    self.assertEqual(chain[0]['CA'].mass, 12.011)
    self.assertEqual(chain[0]['N'].mass, 14.007)

  @parameterized.named_parameters(
      ('one_letter', 'AHA'),
      ('names', 'ALA HIS ALA'),
      ('list', ['ALA', 'HIS', 'ALA']),
  )
  def test_sequence_formats(self, sequence):
    chain = residues.build_chain(sequence)
    self.assertLen(chain, 3)
    self.assertIs(chain[1].residue_type, ResidueType.HIS)
    # HSD by default.
    self.assertTrue(chain[1].has_atom('HD1'))
    self.assertFalse(chain[1].has_atom('HE2'))

  def test_histidine_choice(self):
    chain = residues.build_chain('AHA', histidine='HSP')
    self.assertTrue(chain[1].has_atom('HD1'))
    self.assertTrue(chain[1].has_atom('HE2'))

  def test_explicit_tautomer_names(self):
    chain = residues.build_chain(['ALA', 'HSE', 'ALA'])
    self.assertFalse(chain[1].has_atom('HD1'))
    self.assertTrue(chain[1].has_atom('HE2'))

  @parameterized.named_parameters(
      ('unknown_letter', 'ABA'),
      ('unknown_name', 'ALA XYZ'),
      ('single_residue', 'A'),
  )
  def test_invalid_sequence(self, sequence):
    with self.assertRaises(ValueError):
      residues.build_chain(sequence)

  def test_invalid_histidine(self):
    with self.assertRaises(ValueError):
      residues.build_chain('AHA', histidine='HIS')


if __name__ == '__main__':
  absltest.main()
