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

"""Tests for charmm_eef1.lookup."""

from absl.testing import absltest

import jax

from charmm_eef1 import lookup
from charmm_eef1 import params
from charmm_eef1 import test_util
from charmm_eef1.params import WILDCARD

jax.config.parse_flags_with_absl()


def _torsions(*rows):
  return params.load_torsion_parameters(rows)


def _impropers(*rows):
  return params.load_improper_torsion_parameters(rows)


class LookupTest(test_util.CharmmTestCase):

  def test_either_order(self):
    stages = lookup.either_order(('A', 'B', 'C'))
    self.assertEqual([s.pattern for s in stages],
                     [('A', 'B', 'C'), ('C', 'B', 'A')])
    self.assertEqual([s.reverse for s in stages], [False, True])

  def test_either_order_palindrome(self):
    stages = lookup.either_order(('HA3', 'CT3', 'HA3'))
    self.assertLen(stages, 1)
    self.assertFalse(stages[0].reverse)

  def test_by_stage_prefers_earlier_stage(self):
    table = _torsions(('D', 'C', 'B', 'A', '9', '1.0', '1.0', '1'),
                      ('A', 'B', 'C', 'D', '9', '2.0', '1.0', '1'))
    match = lookup.first_match(table, lookup.either_order(('A', 'B', 'C', 'D')))
    self.assertEqual(match.entry.phi0, 2.0)
    self.assertFalse(match.stage.reverse)

  def test_single_pass_prefers_file_order(self):
    table = _torsions(('D', 'C', 'B', 'A', '9', '1.0', '1.0', '1'),
                      ('A', 'B', 'C', 'D', '9', '2.0', '1.0', '1'))
    match = lookup.first_match(table,
                               lookup.either_order(('A', 'B', 'C', 'D')),
                               by_stage=False)
    self.assertEqual(match.entry.phi0, 1.0)
    self.assertTrue(match.stage.reverse)

  def test_no_match(self):
    table = _torsions(('A', 'B', 'C', 'D', '9', '0.0', '1.0', '1'))
    self.assertIsNone(
        lookup.first_match(table, lookup.either_order(('A', 'B', 'C', 'E'))))
    self.assertEqual(
        lookup.all_matches(table, lookup.either_order(('A', 'B', 'C', 'E'))),
        ())

  def test_all_matches_stops_at_first_matching_stage(self):
    table = _torsions(('A', 'B', 'C', 'D', '9', '0.0', '1.0', '1'),
                      ('D', 'C', 'B', 'A', '9', '0.0', '1.0', '4'),
                      ('A', 'B', 'C', 'D', '9', '180.0', '1.0', '2'))
    matches = lookup.all_matches(table,
                                 lookup.either_order(('A', 'B', 'C', 'D')))
    self.assertEqual([m.entry.mult for m in matches], [1, 2])
    self.assertTrue(all(not m.stage.reverse for m in matches))

  def test_all_matches_falls_back_to_reverse(self):
    table = _torsions(('D', 'C', 'B', 'A', '9', '0.0', '1.0', '3'),
                      ('D', 'C', 'B', 'A', '9', '180.0', '1.0', '2'))
    matches = lookup.all_matches(table,
                                 lookup.either_order(('A', 'B', 'C', 'D')))
    self.assertEqual([m.entry.mult for m in matches], [3, 2])
    self.assertTrue(all(m.stage.reverse for m in matches))

  def test_torsion_wildcard_stages(self):
    stages = lookup.torsion_wildcard_stages(('A', 'B', 'C', 'D'))
    self.assertEqual(stages[0].pattern, (WILDCARD, 'B', 'C', WILDCARD))
    self.assertEqual(stages[1].pattern, (WILDCARD, 'C', 'B', WILDCARD))
    self.assertTrue(stages[1].reverse)

  def test_wildcard_never_equals_concrete_type(self):
    table = _torsions(('X', 'B', 'C', 'X', '9', '0.0', '1.0', '1'))
    # An atom type literally named X is not a wildcard.
    self.assertIsNone(
        lookup.first_match(table, lookup.either_order(('X', 'B', 'C', 'X'))))
    self.assertIsNotNone(
        lookup.first_match(table,
                           lookup.torsion_wildcard_stages(('X', 'B', 'C', 'X'))))

  def test_improper_stage_order(self):
    stages = lookup.improper_stages(('A', 'B', 'C', 'D'))
    self.assertEqual([s.pattern for s in stages],
                     [('A', 'B', 'C', 'D'),
                      ('D', 'C', 'B', 'A'),
                      ('A', WILDCARD, WILDCARD, 'D'),
                      ('D', WILDCARD, WILDCARD, 'A')])

  def test_improper_exact_beats_wildcard(self):
    table = _impropers(('A', 'X', 'X', 'D', '2', '1.0', '1.0'),
                       ('D', 'C', 'B', 'A', '2', '2.0', '1.0'))
    match = lookup.first_match(table,
                               lookup.improper_stages(('A', 'B', 'C', 'D')))
    self.assertEqual(match.entry.phi0, 2.0)

  def test_improper_forward_wildcard_beats_reverse(self):
    table = _impropers(('D', 'X', 'X', 'A', '2', '1.0', '1.0'),
                       ('A', 'X', 'X', 'D', '2', '2.0', '1.0'))
    match = lookup.first_match(table,
                               lookup.improper_stages(('A', 'B', 'C', 'D')))
    self.assertEqual(match.entry.phi0, 2.0)


if __name__ == '__main__':
  absltest.main()
