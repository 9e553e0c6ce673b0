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

"""Readers for GROMACS style `.itp` parameter tables.

Only tokenization happens here. Each non-empty line, with `;` comments and
`[ section ]` headers removed, becomes one row of whitespace separated
fields that is handed to the loaders in `charmm_eef1.params`.

A parameter directory holds one file per table:

  bonds.itp, angles.itp, dihedrals.itp, impropers.itp, nonbonded.itp,
  pairs.itp

and optionally an EEF1 solvation table `solvation.dat` with rows
`type volume dg_ref dg_free lambda radius`.
"""

import os
from typing import List, Tuple

from absl import logging

from charmm_eef1 import params
from charmm_eef1.params import ParameterSet, SolvationTables

COMMENT = ';'
SOLVATION_FILE = 'solvation.dat'

PARAMETER_FILES = {
    'bonded_pairs': 'bonds.itp',
    'angle_bends': 'angles.itp',
    'torsions': 'dihedrals.itp',
    'improper_torsions': 'impropers.itp',
    'non_bonded': 'nonbonded.itp',
    'non_bonded_14': 'pairs.itp',
}


def tokenize_itp(text: str) -> List[Tuple[str, ...]]:
  """Splits `.itp` text into rows of fields.

  Comments start with `;` (or `#` in solvation tables) and run to the end of
  the line. Blank lines and `[ section ]` headers are dropped.
  """
  rows = []
  for line in text.splitlines():
    line = line.split(COMMENT, 1)[0].split('#', 1)[0].strip()
    if not line:
      continue
    if line.startswith('[') and line.endswith(']'):
      continue
    rows.append(tuple(line.split()))
  return rows


def _read_rows(path: str) -> List[Tuple[str, ...]]:
  with open(path, 'r') as f:
    rows = tokenize_itp(f.read())
  logging.vlog(1, 'Read %d rows from %s', len(rows), path)
  return rows


def read_bonded_pair_itp(path: str):
  return params.load_bonded_pair_parameters(_read_rows(path))


def read_angle_bend_itp(path: str):
  return params.load_angle_bend_parameters(_read_rows(path))


def read_torsion_itp(path: str):
  return params.load_torsion_parameters(_read_rows(path))


def read_improper_torsion_itp(path: str):
  return params.load_improper_torsion_parameters(_read_rows(path))


def read_non_bonded_itp(path: str):
  return params.load_non_bonded_parameters(_read_rows(path))


def read_non_bonded_14_itp(path: str):
  return params.load_non_bonded_14_parameters(_read_rows(path))


def read_parameter_set(directory: str) -> ParameterSet:
  """Reads every table of a parameter directory.

  Args:
    directory: Directory holding the files listed in `PARAMETER_FILES`.

  Returns:
    A `ParameterSet`.

  Raises:
    FileNotFoundError: If one of the files is missing.
    ParameterRecordError: If a row cannot be converted.
  """
  rows = {field: _read_rows(os.path.join(directory, filename))
          for field, filename in PARAMETER_FILES.items()}
  parameter_set = ParameterSet.from_rows(**rows)
  logging.info(
      'Loaded parameters from %s: %d bonds, %d angles, %d torsions, '
      '%d impropers, %d atom types, %d 1-4 pairs.', directory,
      len(parameter_set.bonded_pairs), len(parameter_set.angle_bends),
      len(parameter_set.torsions), len(parameter_set.improper_torsions),
      len(parameter_set.non_bonded), len(parameter_set.non_bonded_14))
  return parameter_set


def read_solvation_table(path: str) -> SolvationTables:
  """Reads an EEF1 solvation table and computes its pair factors."""
  tables = params.load_solvation_parameters(_read_rows(path))
  logging.info('Loaded %d solvation types from %s', len(tables.type_index),
               path)
  return tables
