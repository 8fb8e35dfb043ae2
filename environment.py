"""
Core runtime environments - persistent, parent-linked frames
Extension never mutates: a closure keeps seeing exactly the frames it captured
"""

from typing import Any, Dict, Iterable, Optional, Sequence, Tuple
from error_handling import UnboundVariable


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Dict] = None) -> Dict:
  """Create an immutable runtime environment frame"""
  return {
      'parent': parent,
      'bindings': bindings or {}
  }


def empty_env() -> Dict:
  """Environment with no bindings"""
  return make_runtime_env()


# ============================================================================
# ENVIRONMENT OPERATIONS (Pure Functions)
# ============================================================================

def env_extend(env: Dict, name: str, value: Dict) -> Dict:
  """Return new environment with name bound to value, shadowing any older binding"""
  return make_runtime_env(env, {name: value})


def env_extend_all(env: Dict, names: Sequence[str], values: Sequence[Dict]) -> Dict:
  """Bind names to values pairwise, left to right"""
  for name, value in zip(names, values):
    env = env_extend(env, name, value)
  return env


def env_from_list(pairs: Iterable[Tuple[str, Dict]]) -> Dict:
  """Build an environment from (name, value) pairs; later pairs shadow earlier ones"""
  env = empty_env()
  for name, value in pairs:
    env = env_extend(env, name, value)
  return env


def env_lookup(env: Dict, name: str) -> Dict:
  """Look up a value in the environment chain"""
  frame = env
  while frame is not None:
    if name in frame['bindings']:
      return frame['bindings'][name]
    frame = frame['parent']
  raise UnboundVariable(name)


def env_contains(env: Dict, name: str) -> bool:
  """True when name is bound somewhere in the chain"""
  frame = env
  while frame is not None:
    if name in frame['bindings']:
      return True
    frame = frame['parent']
  return False


def env_bindings(env: Dict) -> Dict[str, Any]:
  """Flatten the visible bindings, innermost first in iteration order"""
  visible = {}
  frame = env
  while frame is not None:
    for name, value in frame['bindings'].items():
      if name not in visible:
        visible[name] = value
    frame = frame['parent']
  return visible
