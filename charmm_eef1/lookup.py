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

"""Ordered lookup of parameter table entries by type pattern.

A lookup is described by a sequence of `Stage`s. Each stage holds the exact
type tuple an entry must carry (wildcard positions included) and whether a
match means the interaction's atoms should be read in reverse. Tables are
never re-sorted or hashed so that ties are broken by file order.
"""

from typing import Any, NamedTuple, Optional, Sequence, Tuple

from charmm_eef1.params import TypeLabel, WILDCARD


class Stage(NamedTuple):
  """A single pattern to test table entries against.

  Attributes:
    pattern: Type labels that `entry.types` must equal.
    reverse: True if the pattern is the reversed type tuple of the
      interaction.
  """
  pattern: Tuple[TypeLabel, ...]
  reverse: bool = False

  def matches(self, entry: Any) -> bool:
    return entry.types == self.pattern


class Match(NamedTuple):
  entry: Any
  stage: Stage


def first_match(table: Sequence[Any],
                stages: Sequence[Stage],
                by_stage: bool = True) -> Optional[Match]:
  """Returns the first entry of `table` matching one of `stages`.

  Args:
    table: Parameter entries in file order.
    stages: Patterns in priority order.
    by_stage: If True, each stage is tried over the whole table before moving
      to the next one. If False, the table is scanned once and every entry is
      tested against all stages, so the earliest entry in file order wins
      regardless of which stage it matches.

  Returns:
    The match, or None if no entry matches any stage.
  """
  if by_stage:
    for stage in stages:
      for entry in table:
        if stage.matches(entry):
          return Match(entry, stage)
    return None

  for entry in table:
    for stage in stages:
      if stage.matches(entry):
        return Match(entry, stage)
  return None


def all_matches(table: Sequence[Any],
                stages: Sequence[Stage]) -> Tuple[Match, ...]:
  """Returns every entry matching the first stage that matches anything."""
  for stage in stages:
    matches = tuple(Match(entry, stage) for entry in table
                    if stage.matches(entry))
    if matches:
      return matches
  return ()


# Patterns


def either_order(types: Sequence[str]) -> Tuple[Stage, ...]:
  """Exact match of `types` or of its reverse."""
  types = tuple(types)
  reverse = types[::-1]
  if reverse == types:
    return (Stage(types),)
  return (Stage(types), Stage(reverse, reverse=True))


def torsion_wildcard_stages(types: Sequence[str]) -> Tuple[Stage, ...]:
  """`(X, t2, t3, X)` followed by `(X, t3, t2, X)`."""
  _, t2, t3, _ = types
  return (Stage((WILDCARD, t2, t3, WILDCARD)),
          Stage((WILDCARD, t3, t2, WILDCARD), reverse=True))


def improper_stages(types: Sequence[str]) -> Tuple[Stage, ...]:
  """Exact forward, exact reverse, `(t1, X, X, t4)` and `(t4, X, X, t1)`."""
  t1, t2, t3, t4 = types
  return (Stage((t1, t2, t3, t4)),
          Stage((t4, t3, t2, t1), reverse=True),
          Stage((t1, WILDCARD, WILDCARD, t4)),
          Stage((t4, WILDCARD, WILDCARD, t1), reverse=True))
