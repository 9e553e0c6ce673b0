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

"""CHARMM36 residue templates and a chain builder.

Atom names, types and charges follow `top_all36_prot.rtf`. Templates list
the atoms of a residue in the middle of a chain; the N- and C-terminal
patches (NTER, GLYP, PROP and CTER) are applied by `build_chain`.
"""

from typing import Dict, Iterable, NamedTuple, Optional, Sequence, Tuple

from charmm_eef1.structure import Atom, Chain, Residue, ResidueType


class AtomTemplate(NamedTuple):
  name: str
  atom_type: str
  charge: float


class ResidueTemplate(NamedTuple):
  """Atoms and intra-residue bonds of one residue.

  Attributes:
    residue_type: Amino acid.
    atoms: Atom templates in residue order.
    bonds: Pairs of atom names.
  """
  residue_type: ResidueType
  atoms: Tuple[AtomTemplate, ...]
  bonds: Tuple[Tuple[str, str], ...]


ELEMENT_MASS = {
    'H': 1.008,
    'C': 12.011,
    'N': 14.007,
    'O': 15.999,
    'S': 32.06,
}


def _atoms(spec: str) -> Tuple[AtomTemplate, ...]:
  """Parses whitespace separated `name type charge` triples."""
  tokens = spec.split()
  return tuple(AtomTemplate(tokens[i], tokens[i + 1], float(tokens[i + 2]))
               for i in range(0, len(tokens), 3))


def _bonds(spec: str) -> Tuple[Tuple[str, str], ...]:
  tokens = spec.split()
  return tuple((tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2))


_AMIDE = _atoms('N NH1 -0.47  HN H 0.31  CA CT1 0.07  HA HB1 0.09')
_CARBONYL = _atoms('C C 0.51  O O -0.51')
_BACKBONE_BONDS = _bonds('N HN  N CA  C CA  CA HA  C O')

# Side chain atoms and bonds, excluding the backbone above.
_SIDE_CHAINS: Dict[str, Tuple[ResidueType, str, str]] = {
    'ALA': (ResidueType.ALA,
            'CB CT3 -0.27  HB1 HA3 0.09  HB2 HA3 0.09  HB3 HA3 0.09',
            'CB CA  CB HB1  CB HB2  CB HB3'),
    'ARG': (ResidueType.ARG,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT2 -0.18  HG1 HA2 0.09  HG2 HA2 0.09 '
            'CD CT2 0.20  HD1 HA2 0.09  HD2 HA2 0.09 '
            'NE NC2 -0.70  HE HC 0.44  CZ C 0.64 '
            'NH1 NC2 -0.80  HH11 HC 0.46  HH12 HC 0.46 '
            'NH2 NC2 -0.80  HH21 HC 0.46  HH22 HC 0.46',
            'CB CA  CG CB  CD CG  NE CD  CZ NE  NH1 CZ  NH2 CZ '
            'CB HB1  CB HB2  CG HG1  CG HG2  CD HD1  CD HD2  NE HE '
            'NH1 HH11  NH1 HH12  NH2 HH21  NH2 HH22'),
    'ASN': (ResidueType.ASN,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CC 0.55  OD1 O -0.55 '
            'ND2 NH2 -0.62  HD21 H 0.32  HD22 H 0.30',
            'CB CA  CG CB  OD1 CG  ND2 CG  CB HB1  CB HB2 '
            'ND2 HD21  ND2 HD22'),
    'ASP': (ResidueType.ASP,
            'CB CT2A -0.28  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CC 0.62  OD1 OC -0.76  OD2 OC -0.76',
            'CB CA  CG CB  OD1 CG  OD2 CG  CB HB1  CB HB2'),
    'CYS': (ResidueType.CYS,
            'CB CT2 -0.11  HB1 HA2 0.09  HB2 HA2 0.09 '
            'SG S -0.23  HG1 HS 0.16',
            'CB CA  SG CB  CB HB1  CB HB2  SG HG1'),
    'GLN': (ResidueType.GLN,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT2 -0.18  HG1 HA2 0.09  HG2 HA2 0.09 '
            'CD CC 0.55  OE1 O -0.55 '
            'NE2 NH2 -0.62  HE21 H 0.32  HE22 H 0.30',
            'CB CA  CG CB  CD CG  OE1 CD  NE2 CD  CB HB1  CB HB2 '
            'CG HG1  CG HG2  NE2 HE21  NE2 HE22'),
    'GLU': (ResidueType.GLU,
            'CB CT2A -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT2 -0.28  HG1 HA2 0.09  HG2 HA2 0.09 '
            'CD CC 0.62  OE1 OC -0.76  OE2 OC -0.76',
            'CB CA  CG CB  CD CG  OE1 CD  OE2 CD  CB HB1  CB HB2 '
            'CG HG1  CG HG2'),
    'HSD': (ResidueType.HIS,
            'CB CT2 -0.09  HB1 HA2 0.09  HB2 HA2 0.09 '
            'ND1 NR1 -0.36  HD1 H 0.32  CG CPH1 -0.05 '
            'CE1 CPH2 0.25  HE1 HR1 0.13  NE2 NR2 -0.70 '
            'CD2 CPH1 0.22  HD2 HR3 0.10',
            'CB CA  CG CB  ND1 CG  CE1 ND1  NE2 CE1  CD2 NE2  CG CD2 '
            'CB HB1  CB HB2  ND1 HD1  CE1 HE1  CD2 HD2'),
    'HSE': (ResidueType.HIS,
            'CB CT2 -0.08  HB1 HA2 0.09  HB2 HA2 0.09 '
            'ND1 NR2 -0.70  CG CPH1 0.22  CE1 CPH2 0.25  HE1 HR1 0.13 '
            'NE2 NR1 -0.36  HE2 H 0.32  CD2 CPH1 -0.05  HD2 HR3 0.09',
            'CB CA  CG CB  ND1 CG  CE1 ND1  NE2 CE1  CD2 NE2  CG CD2 '
            'CB HB1  CB HB2  CE1 HE1  NE2 HE2  CD2 HD2'),
    'HSP': (ResidueType.HIS,
            'CB CT2A -0.05  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CD2 CPH1 0.19  HD2 HR1 0.13  CG CPH1 0.19 '
            'NE2 NR3 -0.51  HE2 H 0.44  ND1 NR3 -0.51  HD1 H 0.44 '
            'CE1 CPH2 0.32  HE1 HR2 0.18',
            'CB CA  CG CB  ND1 CG  CE1 ND1  NE2 CE1  CD2 NE2  CG CD2 '
            'CB HB1  CB HB2  ND1 HD1  CE1 HE1  NE2 HE2  CD2 HD2'),
    'ILE': (ResidueType.ILE,
            'CB CT1 -0.09  HB HA1 0.09 '
            'CG2 CT3 -0.27  HG21 HA3 0.09  HG22 HA3 0.09  HG23 HA3 0.09 '
            'CG1 CT2 -0.18  HG11 HA2 0.09  HG12 HA2 0.09 '
            'CD CT3 -0.27  HD1 HA3 0.09  HD2 HA3 0.09  HD3 HA3 0.09',
            'CB CA  CG1 CB  CG2 CB  CD CG1  CB HB '
            'CG2 HG21  CG2 HG22  CG2 HG23  CG1 HG11  CG1 HG12 '
            'CD HD1  CD HD2  CD HD3'),
    'LEU': (ResidueType.LEU,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT1 -0.09  HG HA1 0.09 '
            'CD1 CT3 -0.27  HD11 HA3 0.09  HD12 HA3 0.09  HD13 HA3 0.09 '
            'CD2 CT3 -0.27  HD21 HA3 0.09  HD22 HA3 0.09  HD23 HA3 0.09',
            'CB CA  CG CB  CD1 CG  CD2 CG  CB HB1  CB HB2  CG HG '
            'CD1 HD11  CD1 HD12  CD1 HD13  CD2 HD21  CD2 HD22  CD2 HD23'),
    'LYS': (ResidueType.LYS,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT2 -0.18  HG1 HA2 0.09  HG2 HA2 0.09 '
            'CD CT2 -0.18  HD1 HA2 0.09  HD2 HA2 0.09 '
            'CE CT2 0.21  HE1 HA2 0.05  HE2 HA2 0.05 '
            'NZ NH3 -0.30  HZ1 HC 0.33  HZ2 HC 0.33  HZ3 HC 0.33',
            'CB CA  CG CB  CD CG  CE CD  NZ CE  CB HB1  CB HB2 '
            'CG HG1  CG HG2  CD HD1  CD HD2  CE HE1  CE HE2 '
            'NZ HZ1  NZ HZ2  NZ HZ3'),
    'MET': (ResidueType.MET,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09 '
            'CG CT2 -0.14  HG1 HA2 0.09  HG2 HA2 0.09 '
            'SD S -0.09  CE CT3 -0.22  HE1 HA3 0.09  HE2 HA3 0.09 '
            'HE3 HA3 0.09',
            'CB CA  CG CB  SD CG  CE SD  CB HB1  CB HB2  CG HG1  CG HG2 '
            'CE HE1  CE HE2  CE HE3'),
    'PHE': (ResidueType.PHE,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09  CG CA 0.00 '
            'CD1 CA -0.115  HD1 HP 0.115  CE1 CA -0.115  HE1 HP 0.115 '
            'CZ CA -0.115  HZ HP 0.115  CD2 CA -0.115  HD2 HP 0.115 '
            'CE2 CA -0.115  HE2 HP 0.115',
            'CB CA  CG CB  CD1 CG  CD2 CG  CE1 CD1  CE2 CD2  CZ CE1 '
            'CZ CE2  CB HB1  CB HB2  CD1 HD1  CD2 HD2  CE1 HE1 '
            'CE2 HE2  CZ HZ'),
    'SER': (ResidueType.SER,
            'CB CT2 0.05  HB1 HA2 0.09  HB2 HA2 0.09 '
            'OG OH1 -0.66  HG1 H 0.43',
            'CB CA  OG CB  CB HB1  CB HB2  OG HG1'),
    'THR': (ResidueType.THR,
            'CB CT1 0.14  HB HA1 0.09  OG1 OH1 -0.66  HG1 H 0.43 '
            'CG2 CT3 -0.27  HG21 HA3 0.09  HG22 HA3 0.09  HG23 HA3 0.09',
            'CB CA  OG1 CB  CG2 CB  CB HB  OG1 HG1 '
            'CG2 HG21  CG2 HG22  CG2 HG23'),
    'TRP': (ResidueType.TRP,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09  CG CY -0.03 '
            'CD1 CA 0.035  HD1 HP 0.115  NE1 NY -0.61  HE1 H 0.38 '
            'CE2 CPT 0.13  CD2 CPT -0.02  CE3 CAI -0.115  HE3 HP 0.115 '
            'CZ3 CA -0.115  HZ3 HP 0.115  CZ2 CAI -0.115  HZ2 HP 0.115 '
            'CH2 CA -0.115  HH2 HP 0.115',
            'CB CA  CG CB  CD1 CG  CD2 CG  NE1 CD1  CE2 NE1  CE2 CD2 '
            'CE3 CD2  CZ3 CE3  CH2 CZ3  CZ2 CH2  CE2 CZ2 '
            'CB HB1  CB HB2  CD1 HD1  NE1 HE1  CE3 HE3  CZ3 HZ3 '
            'CZ2 HZ2  CH2 HH2'),
    'TYR': (ResidueType.TYR,
            'CB CT2 -0.18  HB1 HA2 0.09  HB2 HA2 0.09  CG CA 0.00 '
            'CD1 CA -0.115  HD1 HP 0.115  CE1 CA -0.115  HE1 HP 0.115 '
            'CZ CA 0.11  OH OH1 -0.54  HH H 0.43 '
            'CD2 CA -0.115  HD2 HP 0.115  CE2 CA -0.115  HE2 HP 0.115',
            'CB CA  CG CB  CD1 CG  CD2 CG  CE1 CD1  CE2 CD2  CZ CE1 '
            'CZ CE2  OH CZ  CB HB1  CB HB2  CD1 HD1  CD2 HD2 '
            'CE1 HE1  CE2 HE2  OH HH'),
    'VAL': (ResidueType.VAL,
            'CB CT1 -0.09  HB HA1 0.09 '
            'CG1 CT3 -0.27  HG11 HA3 0.09  HG12 HA3 0.09  HG13 HA3 0.09 '
            'CG2 CT3 -0.27  HG21 HA3 0.09  HG22 HA3 0.09  HG23 HA3 0.09',
            'CB CA  CG1 CB  CG2 CB  CB HB  CG1 HG11  CG1 HG12  CG1 HG13 '
            'CG2 HG21  CG2 HG22  CG2 HG23'),
}


def _make_templates() -> Dict[str, ResidueTemplate]:
  templates = {}
  for name, (residue_type, atoms, bonds) in _SIDE_CHAINS.items():
    templates[name] = ResidueTemplate(
        residue_type,
        _AMIDE + _atoms(atoms) + _CARBONYL,
        _BACKBONE_BONDS + _bonds(bonds))

  templates['GLY'] = ResidueTemplate(
      ResidueType.GLY,
      _atoms('N NH1 -0.47  HN H 0.31  CA CT2 -0.02  HA1 HB2 0.09 '
             'HA2 HB2 0.09') + _CARBONYL,
      _bonds('N HN  N CA  C CA  CA HA1  CA HA2  C O'))

  templates['PRO'] = ResidueTemplate(
      ResidueType.PRO,
      _atoms('N N -0.29  CD CP3 0.00  HD1 HA2 0.09  HD2 HA2 0.09 '
             'CA CP1 0.02  HA HB1 0.09  CB CP2 -0.18  HB1 HA2 0.09 '
             'HB2 HA2 0.09  CG CP2 -0.18  HG1 HA2 0.09  HG2 HA2 0.09') +
      _CARBONYL,
      _bonds('N CA  N CD  C CA  CA HA  CA CB  CB CG  CG CD  CB HB1 '
             'CB HB2  CG HG1  CG HG2  CD HD1  CD HD2  C O'))
  return templates


TEMPLATES: Dict[str, ResidueTemplate] = _make_templates()

# Histidine tautomer used when a sequence just says HIS (or H).
DEFAULT_HISTIDINE = 'HSD'

ONE_LETTER = {
    'A': 'ALA', 'R': 'ARG', 'N': 'ASN', 'D': 'ASP', 'C': 'CYS', 'Q': 'GLN',
    'E': 'GLU', 'G': 'GLY', 'H': 'HIS', 'I': 'ILE', 'L': 'LEU', 'K': 'LYS',
    'M': 'MET', 'F': 'PHE', 'P': 'PRO', 'S': 'SER', 'T': 'THR', 'W': 'TRP',
    'Y': 'TYR', 'V': 'VAL',
}


# Terminal patches


def _patch(template: ResidueTemplate,
           replace: Dict[str, AtomTemplate],
           remove: Iterable[str] = (),
           add_after: Optional[Tuple[str, Sequence[AtomTemplate]]] = None,
           add_bonds: Sequence[Tuple[str, str]] = ()) -> ResidueTemplate:
  remove = set(remove)
  atoms = []
  for atom in template.atoms:
    if atom.name in remove:
      continue
    atoms.append(replace.get(atom.name, atom))
    if add_after is not None and atom.name == add_after[0]:
      atoms.extend(add_after[1])
  bonds = tuple(b for b in template.bonds
                if b[0] not in remove and b[1] not in remove)
  return template._replace(atoms=tuple(atoms), bonds=bonds + tuple(add_bonds))


def n_terminal(template: ResidueTemplate) -> ResidueTemplate:
  """Applies NTER, or GLYP/PROP for glycine and proline."""
  if template.residue_type is ResidueType.PRO:
    return _patch(
        template,
        {'N': AtomTemplate('N', 'NP', -0.07),
         'CD': AtomTemplate('CD', 'CP3', 0.16),
         'CA': AtomTemplate('CA', 'CP1', 0.16)},
        add_after=('N', _atoms('HN1 HC 0.24  HN2 HC 0.24')),
        add_bonds=_bonds('N HN1  N HN2'))

  if template.residue_type is ResidueType.GLY:
    replace = {'N': AtomTemplate('N', 'NH3', -0.30),
               'CA': AtomTemplate('CA', 'CT2', 0.13)}
  else:
    replace = {'N': AtomTemplate('N', 'NH3', -0.30),
               'CA': AtomTemplate('CA', 'CT1', 0.21),
               'HA': AtomTemplate('HA', 'HB1', 0.10)}
  return _patch(
      template,
      replace,
      remove=('HN',),
      add_after=('N', _atoms('HT1 HC 0.33  HT2 HC 0.33  HT3 HC 0.33')),
      add_bonds=_bonds('N HT1  N HT2  N HT3'))


def c_terminal(template: ResidueTemplate) -> ResidueTemplate:
  """Applies CTER, the terminal oxygen is named OXT."""
  return _patch(
      template,
      {'C': AtomTemplate('C', 'CC', 0.34),
       'O': AtomTemplate('O', 'OC', -0.67)},
      add_after=('O', _atoms('OXT OC -0.67')),
      add_bonds=_bonds('C OXT'))


def residue_from_template(template: ResidueTemplate) -> Residue:
  atoms = [Atom(a.name, a.atom_type, a.charge, ELEMENT_MASS[a.name[0]])
           for a in template.atoms]
  return Residue(template.residue_type, atoms, template.bonds)


def _residue_names(sequence, histidine: str) -> Tuple[str, ...]:
  if isinstance(sequence, str):
    if ' ' in sequence.strip():
      sequence = sequence.split()
    else:
      try:
        sequence = [ONE_LETTER[c] for c in sequence.upper()]
      except KeyError as e:
        raise ValueError(f'Unknown residue {e.args[0]}.') from e
  names = []
  for name in sequence:
    name = name.upper()
    if name == 'HIS':
      name = histidine
    if name not in TEMPLATES:
      raise ValueError(f'Unknown residue {name}.')
    names.append(name)
  return tuple(names)


def build_chain(sequence, histidine: str = DEFAULT_HISTIDINE) -> Chain:
  """Builds a chain with terminal patches and peptide bonds.

  Args:
    sequence: Either a one letter sequence such as `'AGA'` or an iterable of
      residue names such as `['ALA', 'HSE', 'ALA']`.
    histidine: Template (`'HSD'`, `'HSE'` or `'HSP'`) used for `HIS`.

  Returns:
    A `Chain` whose first residue carries the NTER-type patch and whose last
    residue carries CTER.
  """
  if histidine not in ('HSD', 'HSE', 'HSP'):
    raise ValueError(f'Unknown histidine template {histidine}.')
  names = _residue_names(sequence, histidine)
  if len(names) < 2:
    raise ValueError('A chain needs at least two residues.')

  residues = []
  for i, name in enumerate(names):
    template = TEMPLATES[name]
    if i == 0:
      template = n_terminal(template)
    if i == len(names) - 1:
      template = c_terminal(template)
    residues.append(residue_from_template(template))
  return Chain(residues)
