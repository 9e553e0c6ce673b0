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

"""Defines utility functions."""

from typing import Any, Sequence

import jax.numpy as jnp

import numpy as onp

Array = jnp.ndarray

i32 = jnp.int32
f32 = jnp.float32


def read_only(x: Any, dtype=onp.float64) -> onp.ndarray:
  """Copies `x` into a numpy array that cannot be written to."""
  arr = onp.array(x, dtype=dtype)
  arr.setflags(write=False)
  return arr


def index_array(rows: Sequence[Sequence[int]], width: int) -> Array:
  """Builds an `[n, width]` integer array, keeping the shape when empty."""
  if len(rows) == 0:
    return jnp.zeros((0, width), dtype=i32)
  return jnp.array(rows, dtype=i32)


def value_array(values: Sequence[float], dtype=f32) -> Array:
  if len(values) == 0:
    return jnp.zeros((0,), dtype=dtype)
  return jnp.array(values, dtype=dtype)
